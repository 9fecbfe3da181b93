from __future__ import annotations

from typing import Optional


class TechNewsError(Exception):
    """Base class for every error raised while fetching a news batch."""


class ConfigurationError(TechNewsError):
    """Raised when the API credential is missing or still a placeholder."""


class ParseError(TechNewsError):
    """Raised when upstream text does not contain decodable JSON."""

    def __init__(self, message: str, raw_text: Optional[str] = None) -> None:
        super().__init__(message)
        self.raw_text = raw_text


class TransportError(TechNewsError):
    """Raised when the proxy or the model endpoint cannot be reached or answers non-2xx."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class UpstreamRateLimit(TechNewsError):
    """Raised when the model endpoint reports a quota or rate limit."""


class EmptyResult(TechNewsError):
    """Raised when a fetch succeeds but yields zero news items."""


class NewsFetchError(TechNewsError):
    """Terminal error of a refresh. `message` is safe to show to end users."""

    def __init__(self, message: str, cause: Optional[BaseException] = None) -> None:
        super().__init__(message)
        self.message = message
        self.cause = cause
