"""Contentful configuration values."""

from __future__ import annotations

from dataclasses import dataclass

from .env import env_str, require_env_vars
from .http_resilience import ResilienceConfig, RetryPolicy

CONTENTFUL_API_URL = "https://api.contentful.com/"
CONTENTFUL_TIMEOUT_SECONDS = 30.0


@dataclass(frozen=True)
class ContentfulConfig:
    """Holds Contentful management API configuration values."""

    space_id: str
    access_token: str
    resilience: ResilienceConfig
    content_type: str = "check"
    content_type_name: str = "test"
    default_locale: str = "en-US"
    common_id_field: str = "commonId"


def space_base_url(space_id: str) -> str:
    return f"{CONTENTFUL_API_URL}spaces/{space_id}/"


def get_contentful_config(*, resilience: ResilienceConfig | None = None) -> ContentfulConfig:
    values = require_env_vars(("CONTENTFUL_SPACE_ID", "CONTENTFUL_ACCESS_TOKEN"))
    space_id = values["CONTENTFUL_SPACE_ID"]
    return ContentfulConfig(
        space_id=space_id,
        access_token=values["CONTENTFUL_ACCESS_TOKEN"],
        resilience=resilience
        or ResilienceConfig(
            name="contentful",
            base_url=space_base_url(space_id),
            timeout_seconds=CONTENTFUL_TIMEOUT_SECONDS,
            retry=RetryPolicy(),
        ),
        content_type=env_str("CONTENTFUL_CONTENT_TYPE", "check"),
        content_type_name=env_str("CONTENTFUL_CONTENT_TYPE_NAME", "test"),
        default_locale=env_str("CONTENTFUL_DEFAULT_LANG", "en-US"),
        common_id_field=env_str("CONTENTFUL_TABLE_ID_FIELD", "commonId"),
    )
