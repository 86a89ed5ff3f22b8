"""Pydantic schemas for API requests and responses."""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel

from shortlink.database.models import Link


class CreateLinkRequest(BaseModel):
    """Request to create a short link."""

    target_url: str = Field(..., description="The URL the new link redirects to")
    custom_id: Optional[str] = Field(
        None,
        description="Optional unique ID for the new link; generated when omitted",
    )

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {"targetUrl": "https://crates.io/", "customId": None},
                {"targetUrl": "https://github.com/rust-lang", "customId": "rust"},
            ]
        },
    }


class LinkSchema(BaseModel):
    """A stored short link."""

    id: str = Field(..., description="ID of the shortened link")
    target_url: str = Field(..., description="URL the link redirects to")
    count_redirects: int = Field(..., description="Count of successful redirects")
    created_at: datetime = Field(..., description="Creation time (no timezone)")
    updated_at: datetime = Field(..., description="Last modification time (no timezone)")

    model_config = {
        "alias_generator": to_camel,
        "populate_by_name": True,
        "json_schema_extra": {
            "examples": [
                {
                    "id": "bmdkw",
                    "targetUrl": "https://crates.io/",
                    "countRedirects": 0,
                    "createdAt": "2025-01-01T12:00:00.000000",
                    "updatedAt": "2025-01-01T12:00:00.000000",
                }
            ]
        },
    }

    @classmethod
    def from_link(cls, link: Link) -> "LinkSchema":
        return cls(
            id=link.id,
            target_url=link.target_url,
            count_redirects=link.redirect_count,
            created_at=link.created_at,
            updated_at=link.updated_at,
        )


class ErrorResponse(BaseModel):
    """Error response."""

    message: str = Field(..., description="Description of the failure")
