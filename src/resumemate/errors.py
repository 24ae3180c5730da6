"""Error taxonomy for document generation.

Every class here is absorbed inside the gateway; callers of
``ResilienceGateway.generate`` never see them.
"""

from __future__ import annotations


class GenerationError(Exception):
    """Base class for failures of a generation attempt."""

    retryable: bool = False


class TransientServiceError(GenerationError):
    """Network, rate-limit or 5xx failure of the generation service."""

    retryable = True


class ServiceTimeoutError(TransientServiceError):
    """The attempt exceeded its hard timeout. Terminal for the call."""

    retryable = False


class AuthError(GenerationError):
    """Credential or permission failure. Indicates misconfiguration, not load."""


class SaturationError(GenerationError):
    """No concurrency slot was free."""


class DocumentValidationError(GenerationError):
    """Raw generation output did not match the document structure."""

    retryable = True

    def __init__(self, message: str, issues: list[str] | None = None):
        super().__init__(message)
        self.issues = issues or []
