# src/core/errors.py — v1
"""Error taxonomy for the generation pipeline.

Every failure aborts synthesis of the whole declaration. The classes below
let the invoking build tool tell the four families apart:

  DeclarationParseError      malformed input declaration (caller-level)
  ConfigurationError         missing or contradictory settings
  BackendError               generative service failed or answered badly
  GenerationValidationError  generated fragments failed structural checks
"""

from __future__ import annotations


class BodyforgeError(Exception):
    """Base class for all pipeline errors."""


class DeclarationParseError(BodyforgeError):
    """Input declaration cannot be parsed as an interface implementation."""


class ConfigurationError(BodyforgeError):
    """Raised when configuration is missing or internally inconsistent."""


class OfflineCacheMissError(ConfigurationError):
    """Offline mode is active and no cached generation exists for a key."""

    def __init__(self, key: str, reasons: list[str]) -> None:
        self.key = key
        self.reasons = reasons
        flags = ", ".join(reasons) if reasons else "offline mode"
        super().__init__(
            f"no cached generation available in offline mode "
            f"(key={key}; network disabled by {flags})"
        )


class BackendError(BodyforgeError):
    """Generative backend failure."""


class BackendRequestError(BackendError):
    """The request itself failed: transport error, timeout, non-success status."""

    def __init__(self, detail: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        prefix = "request failed"
        if status_code is not None:
            prefix = f"request failed (HTTP {status_code})"
        super().__init__(f"{prefix}: {detail}")


class BadResponseError(BackendError):
    """The backend answered, but the envelope or payload is unusable."""

    def __init__(self, detail: str) -> None:
        super().__init__(f"bad response: {detail}")


class GenerationValidationError(BodyforgeError):
    """Generated fragments failed structural validation."""


class FragmentCountError(GenerationValidationError):
    """Number of returned bodies differs from number of method signatures."""

    def __init__(self, expected: int, actual: int, structured: bool = True) -> None:
        self.expected = expected
        self.actual = actual
        self.structured = structured
        detail = f"expected {expected} method bodies, got {actual}"
        if not structured:
            detail += " (response was not a JSON bodies object; raw text covers one method only)"
        super().__init__(detail)


class FragmentParseError(GenerationValidationError):
    """A single fragment does not parse as a method body."""

    def __init__(self, method: str, position: int, detail: str) -> None:
        self.method = method
        self.position = position
        self.detail = detail
        super().__init__(
            f"generated body for method {method!r} (position {position}) "
            f"is not a valid block: {detail}"
        )
