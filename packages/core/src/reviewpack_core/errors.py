"""Error taxonomy shared by every reviewpack component.

The CLI turns any ReviewPackError into a plain-text message; no structured
error codes cross the process boundary.
"""

from __future__ import annotations


class ReviewPackError(Exception):
    """Base class for all expected, user-reportable failures."""


class ConfigurationError(ReviewPackError):
    """Required credentials or endpoints are missing. Raised before any network call."""


class TransportError(ReviewPackError):
    """Non-2xx HTTP response or network failure."""


class FormatError(ReviewPackError):
    """The remote service answered, but not in the expected shape."""


class ValidationError(ReviewPackError):
    """A well-formed model response is missing required review sections."""


class InputError(ReviewPackError):
    """The caller supplied unusable input (empty selection, oversized prompt, bad path)."""
