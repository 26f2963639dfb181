"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, Field
from typing import Optional
from datetime import datetime


class CreateLinkRequest(BaseModel):
    """Request to create a short link.

    Both fields are checked by the registry so the error messages and
    status codes match the other entry points.
    """

    target: Optional[str] = Field(None, description="The URL to redirect to")
    code: Optional[str] = Field(None, description="Short code, 6-8 letters or digits")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "target": "https://example.com/very/long/path/to/resource",
                    "code": "docs2024"
                }
            ]
        }
    }


class LinkResponse(BaseModel):
    """A stored link."""

    id: Optional[str] = Field(None, description="Store-assigned identifier")
    code: str = Field(..., description="The short code")
    target: str = Field(..., description="Normalized target URL")
    clicks: int = Field(..., description="Number of redirects served")
    last_clicked: Optional[datetime] = Field(None, description="Time of the latest redirect")
    created_at: datetime = Field(..., description="Creation timestamp")
    short_url: str = Field(..., description="The complete short URL")

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "id": "3f1c2a9e5b7d4e08a6c1f2d3b4a59687",
                    "code": "abcd12",
                    "target": "https://long.example.com/path",
                    "clicks": 3,
                    "last_clicked": "2024-01-01T12:05:00Z",
                    "created_at": "2024-01-01T12:00:00Z",
                    "short_url": "https://short.link/abcd12"
                }
            ]
        }
    }


class DeleteResponse(BaseModel):
    """Response after deleting a link."""

    success: bool = True


class HealthResponse(BaseModel):
    """Health check response."""

    ok: bool = Field(..., description="Overall status")
    version: str = Field(..., description="Service version")
    name: str = Field(..., description="Service name")
    store: str = Field(..., description="Link store status")


class ErrorResponse(BaseModel):
    """Error response."""

    error: str = Field(..., description="Error message")
    details: Optional[dict] = Field(None, description="Detailed error information")
