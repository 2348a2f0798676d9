"""Errors raised outside the provider adapters."""

from __future__ import annotations


class ParseError(ValueError):
    """Model text does not satisfy the output contract for its intent."""


class UpstreamInputMissing(ValueError):
    """A required upstream result is absent; no provider call can fix it."""
