from __future__ import annotations

from typing import Any, Mapping

from pydantic import BaseModel


class Resource(BaseModel):
    """Normalized view of an asset stored at the provider."""

    public_id: str
    secure_url: str
    resource_type: str

    model_config = {"frozen": True}

    @classmethod
    def from_provider(cls, data: Mapping[str, Any]) -> "Resource":
        """Keep only the three public fields of a provider asset payload."""

        return cls(
            public_id=data["public_id"],
            secure_url=data["secure_url"],
            resource_type=data["resource_type"],
        )


class GetImagesResponse(BaseModel):
    """One page of search results plus the cursor for the next page."""

    next_cursor: str | None = None
    resources: list[Resource] = []
