"""Error types raised by the Contentful source."""

from typing import Any, Optional


class ContentfulPipelineError(Exception):
    """Base class for all errors raised by this package."""


class LocaleNotFoundError(ContentfulPipelineError, ValueError):
    """The configured locale code does not exist in the space."""

    def __init__(self, locale: str):
        self.locale = locale
        super().__init__(
            f"Locale {locale} not found for space. "
            "Note that locale codes are case-sensitive."
        )


class ContentfulFetchError(ContentfulPipelineError):
    """A request to the Contentful API failed.

    Carries the HTTP status (if any), the machine-readable ``details``
    payload returned by Contentful and the ``X-Contentful-Request-Id`` so
    failures can be traced with Contentful support.
    """

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        details: Any = None,
        request_id: Optional[str] = None,
    ):
        super().__init__(message)
        self.status_code = status_code
        self.details = details
        self.request_id = request_id
