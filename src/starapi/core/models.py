"""
StarAPI Core Data Models

Defines the request, saved endpoint and response structures shared by the
executor and the endpoint store.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .exceptions import ValidationError


HTTP_METHODS = frozenset({"GET", "POST", "PUT", "DELETE", "PATCH", "HEAD", "OPTIONS"})

# Methods whose requests never carry a payload
BODILESS_METHODS = frozenset({"GET", "HEAD"})


class RequestDescriptor(BaseModel):
    """Method, URL and optional body describing one request."""

    method: str = Field(description="HTTP method")
    url: str = Field(description="Request URL")
    body: Optional[str] = Field(default=None, description="Request body")

    @field_validator("method", mode="before")
    @classmethod
    def validate_method(cls, v: Any) -> str:
        if not isinstance(v, str) or v.strip().upper() not in HTTP_METHODS:
            raise ValidationError(
                f"Invalid HTTP method: {v!r}",
                {"allowed": sorted(HTTP_METHODS)},
            )
        return v.strip().upper()

    @property
    def sends_body(self) -> bool:
        """Whether this request would carry its body over the wire."""
        return (
            self.method not in BODILESS_METHODS
            and self.body is not None
            and bool(self.body.strip())
        )

    def default_name(self) -> str:
        return f"{self.method} {self.url}"


class SavedEndpoint(RequestDescriptor):
    """A request descriptor persisted with a generated id and display name."""

    id: str = Field(description="Unique endpoint id")
    name: str = Field(description="Display label")

    def to_descriptor(self) -> RequestDescriptor:
        """Strip identity, leaving the plain request fields."""
        return RequestDescriptor(method=self.method, url=self.url, body=self.body)

    def to_record(self) -> Dict[str, Any]:
        """Convert to the stored JSON record shape."""
        record: Dict[str, Any] = {"id": self.id, "url": self.url, "method": self.method}
        if self.body is not None:
            record["body"] = self.body
        record["name"] = self.name
        return record


class ResponseResult(BaseModel):
    """Normalized response of a single round-trip."""

    status: int = Field(description="HTTP status code")
    status_text: str = Field(
        default="", alias="statusText", description="Reason phrase"
    )
    headers: Dict[str, str] = Field(
        default_factory=dict, description="Lowercased response headers"
    )
    data: Any = Field(default=None, description="Parsed JSON value or raw text")

    model_config = ConfigDict(populate_by_name=True)

    def to_display(self) -> Dict[str, Any]:
        """Convert to the JSON shape shown to users."""
        return self.model_dump(by_alias=True)
