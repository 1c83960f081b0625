"""Analysis request schema.

One AnalysisRequest is built per call and discarded after the analysis. Every
field is optional: which agents run is decided by which fields are present.
"""

import math
from typing import Any, Optional

from loguru import logger
from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

MIN_RATING = 0.0
MAX_RATING = 5.0


class AppMedia(BaseModel):
    """Media attached to an app listing (store icon, screenshots, promo video)."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    icon_url: Optional[str] = Field(None, description="Store icon URL")
    screenshots: list[str] = Field(default_factory=list, description="Screenshot URLs")
    promotional_video: Optional[str] = Field(None, description="Promotional video URL")

    def media_items(self) -> list[tuple[str, str]]:
        """Return (url, media_type) pairs in a stable order."""
        items: list[tuple[str, str]] = []
        if self.icon_url:
            items.append((self.icon_url, "image"))
        items.extend((url, "image") for url in self.screenshots if url)
        if self.promotional_video:
            items.append((self.promotional_video, "video"))
        return items


class AnalysisRequest(BaseModel):
    """Content to analyze plus optional context.

    A field counts as present when it is non-null and non-empty. Blank strings,
    empty maps and lists, and media without any URL are treated as absent so an
    agent is never dispatched without something to look at. Unknown keys are
    ignored and a rating outside 0-5 is dropped, so only the agents that need a
    rating lose their input.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
        json_schema_extra={
            "examples": [
                {
                    "text": "Used it for 3 weeks. Battery drain issue in v2.1.",
                    "rating": 3,
                    "userContext": {"reviewCount": 50},
                }
            ]
        },
    )

    text: Optional[str] = Field(None, description="Review or claim text")
    rating: Optional[float] = Field(None, ge=MIN_RATING, le=MAX_RATING, description="Star rating")
    user_context: Optional[dict[str, Any]] = Field(
        None, description="Reviewer history and device/account signals"
    )
    app_description: Optional[str] = Field(None, description="App store description")
    source_url: Optional[str] = Field(None, description="URL of the page under analysis")
    app_media: Optional[AppMedia] = Field(None, description="Media attached to the listing")
    reference_texts: Optional[list[str]] = Field(
        None, description="Other reviews to compare against for duplicate detection"
    )

    @field_validator("rating", mode="before")
    @classmethod
    def drop_out_of_range_rating(cls, value: Any) -> Any:
        if isinstance(value, bool) or not isinstance(value, (int, float)):
            return value
        if math.isnan(value) or not MIN_RATING <= value <= MAX_RATING:
            logger.bind(component="schemas.request").warning(
                f"Ignoring rating {value!r} outside {MIN_RATING:g}-{MAX_RATING:g}"
            )
            return None
        return value

    def present_fields(self) -> frozenset[str]:
        """Return the camelCase names of fields that carry usable data."""
        present = set()
        for name, info in type(self).model_fields.items():
            if _is_present(getattr(self, name)):
                present.add(info.alias or name)
        return frozenset(present)


def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, AppMedia):
        return bool(value.media_items())
    if isinstance(value, (dict, list, tuple, set, frozenset)):
        return len(value) > 0
    return True


# camelCase names agents may list as required input fields
REQUEST_FIELDS: frozenset[str] = frozenset(
    info.alias or name for name, info in AnalysisRequest.model_fields.items()
)

__all__ = ["AppMedia", "AnalysisRequest", "REQUEST_FIELDS"]
