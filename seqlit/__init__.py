"""seqlit - sequence processing toolchain for line-oriented text annotation.

Imports raw lines as NDJSON records, marks regex matches as non-overlapping
character spans, and masks marked spans behind a label.
"""

__version__ = "0.1.0"
__author__ = "seqlit Contributors"

from seqlit.config import Settings, get_settings

__all__ = ["Settings", "get_settings", "__version__"]
