"""Exception types raised by tag-releaser.

``ConfigError`` and ``ManifestError`` abort the whole run. ``ReleaseAPIError``
is raised per tag and is handled by the pipeline, which logs it and moves on.
"""

from __future__ import annotations

ALREADY_EXISTS = "already_exists"


class ReleaserError(Exception):
    """Base class for all tag-releaser errors."""


class ConfigError(ReleaserError):
    """Required configuration (token, repository) is missing or malformed."""


class ManifestError(ReleaserError):
    """The root manifest is absent, unparseable, or fails validation."""


class ReleaseAPIError(ReleaserError):
    """The release API rejected a request or could not be reached.

    Attributes:
        status: HTTP status code, or 0 when the request never got a response.
        message: Human-readable message from the API body (or transport error).
        codes: Structured ``errors[].code`` values from the response body.
    """

    def __init__(self, status: int, message: str, codes: list[str] | None = None):
        super().__init__(message)
        self.status = status
        self.message = message
        self.codes = list(codes or [])

    @property
    def already_exists(self) -> bool:
        """True when the release for this tag was already created.

        GitHub answers a duplicate ``tag_name`` with 422 and an
        ``already_exists`` error code. Older clients only saw the code in the
        message text, so that is checked when no structured codes came back.
        """
        if self.status != 422:
            return False
        if self.codes:
            return ALREADY_EXISTS in self.codes
        return ALREADY_EXISTS in self.message

    def __str__(self) -> str:
        if self.status:
            return f"{self.status} {self.message}"
        return self.message
