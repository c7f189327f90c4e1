"""Port interfaces for the seqlit application layer.

Domain logic depends on these ports, never on concrete implementations.
"""

__all__ = ["MatcherPort"]

from seqlit.app.ports.matcher import MatcherPort
