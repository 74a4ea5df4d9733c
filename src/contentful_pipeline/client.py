"""Contentful Delivery Client Module

Thin adapter over the ``contentful`` SDK. The SDK client runs in raw mode so
the JSON payloads can be mapped onto this package's own models, including
the ``includes`` block of each page that the SDK would otherwise resolve
into linked objects and drop.

Environment variables:
  CONTENTFUL_SPACE_ID: Space to read from
  CONTENTFUL_ACCESS_TOKEN: Delivery (or Preview) API token
  CONTENTFUL_ENVIRONMENT: Environment id (default: master)
  CONTENTFUL_USE_PREVIEW: Set to '1' to read drafts from the Preview API
"""

from typing import Any, Dict, Optional
import logging
import os

import contentful
from contentful.errors import HTTPError
import requests
from pydantic import BaseModel, Field

from .errors import ContentfulFetchError
from .models import EntryCollection, Space

logger = logging.getLogger(__name__)

DELIVERY_API_URL = "cdn.contentful.com"
PREVIEW_API_URL = "preview.contentful.com"
REQUEST_ID_HEADER = "X-Contentful-Request-Id"


class ContentfulSettings(BaseModel):
    space_id: str = Field(min_length=1)
    access_token: str = Field(min_length=1)
    environment: str = "master"
    use_preview: bool = False

    @classmethod
    def from_env(cls, **overrides: Any) -> "ContentfulSettings":
        """Build settings from ``CONTENTFUL_*`` variables; non-None overrides win."""
        values = {
            "space_id": os.getenv("CONTENTFUL_SPACE_ID", ""),
            "access_token": os.getenv("CONTENTFUL_ACCESS_TOKEN", ""),
            "environment": os.getenv("CONTENTFUL_ENVIRONMENT", "master"),
            "use_preview": os.getenv("CONTENTFUL_USE_PREVIEW", "0") == "1",
        }
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)


def _fetch_error_from_http(exc: HTTPError) -> ContentfulFetchError:
    response = getattr(exc, "response", None)
    details = None
    request_id = None
    if response is not None:
        request_id = (getattr(response, "headers", None) or {}).get(REQUEST_ID_HEADER)
        try:
            body = response.json()
        except ValueError:
            body = None
        if isinstance(body, dict):
            details = body.get("details")
    return ContentfulFetchError(
        str(exc) or "Contentful request failed",
        status_code=getattr(exc, "status_code", None),
        details=details,
        request_id=request_id,
    )


class ContentfulDeliveryClient:
    """Fetches the space and pages of entries from the Delivery/Preview API."""

    def __init__(
        self,
        space_id: str,
        access_token: str,
        environment: str = "master",
        use_preview: bool = False,
        sdk_client: Optional[Any] = None,
    ):
        self.space_id = space_id
        self.environment = environment
        self.use_preview = use_preview
        self._client = sdk_client or contentful.Client(
            space_id,
            access_token,
            environment=environment,
            api_url=PREVIEW_API_URL if use_preview else DELIVERY_API_URL,
            raw_mode=True,
        )

    @classmethod
    def from_settings(cls, settings: ContentfulSettings) -> "ContentfulDeliveryClient":
        return cls(
            settings.space_id,
            settings.access_token,
            environment=settings.environment,
            use_preview=settings.use_preview,
        )

    def _request(self, what: str, call, *args) -> Dict[str, Any]:
        logger.debug("Contentful request: %s %s", what, args or "")
        try:
            response = call(*args)
        except HTTPError as exc:
            raise _fetch_error_from_http(exc) from exc
        except requests.exceptions.RequestException as exc:
            raise ContentfulFetchError(f"Transport error while fetching {what}: {exc}") from exc
        return response.json()

    def get_space(self) -> Space:
        """Return the space with its locales.

        Falls back to the environment's locales endpoint when the space
        payload does not list locales.
        """
        payload = self._request("space", self._client.space)
        space = Space.from_api(payload)
        if not space.locales:
            locales_payload = self._request("locales", self._client.locales)
            space = Space.from_api({**payload, "locales": locales_payload.get("items") or []})
        logger.debug(
            "Space %s has locales: %s",
            space.id,
            ", ".join(loc.code for loc in space.locales),
        )
        return space

    def get_entries(self, query: Dict[str, Any]) -> EntryCollection:
        payload = self._request("entries", self._client.entries, query)
        return EntryCollection.from_api(payload)
