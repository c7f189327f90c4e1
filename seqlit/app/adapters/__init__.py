"""Concrete adapters wiring application ports to built-in implementations."""

from __future__ import annotations

from .regex_matcher import RegexMatcher

__all__ = ["RegexMatcher"]
