"""Application bootstrap wiring ports, adapters, and services."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from seqlit.app import AnnotationService
from seqlit.app.adapters import RegexMatcher
from seqlit.app.ports import MatcherPort
from seqlit.config import Settings, get_settings


@dataclass(slots=True)
class ApplicationContainer:
    """Aggregates wired services and adapters for the CLI layer."""

    settings: Settings
    matcher_factory: Callable[[str], MatcherPort]
    annotation_service: AnnotationService


def bootstrap_application(
    settings: Settings | None = None,
    *,
    matcher_factory: Callable[[str], MatcherPort] | None = None,
) -> ApplicationContainer:
    """Create the application container using the provided settings."""

    active_settings = settings or get_settings()
    factory = matcher_factory or RegexMatcher

    return ApplicationContainer(
        settings=active_settings,
        matcher_factory=factory,
        annotation_service=AnnotationService(
            matcher_factory=factory,
            settings=active_settings,
        ),
    )
