"""Place detail payload shared by both providers."""

from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, Field


class Place(BaseModel):
    source: Literal["google", "device"]
    place_id: str | None = None
    name: str | None = None
    formatted_address: str | None = None
    latitude: float | None = None
    longitude: float | None = None
    types: list[str] = Field(default_factory=list)
    raw: dict[str, Any] = Field(default_factory=dict)

    @classmethod
    def from_google(cls, result: Any) -> Place:
        """Build a place from the ``result`` object of a details response."""

        data = result if isinstance(result, dict) else {}
        geometry = data.get("geometry")
        location = geometry.get("location") if isinstance(geometry, dict) else None
        if not isinstance(location, dict):
            location = {}
        types = data.get("types")
        return cls(
            source="google",
            place_id=data.get("place_id"),
            name=data.get("name"),
            formatted_address=data.get("formatted_address"),
            latitude=location.get("lat"),
            longitude=location.get("lng"),
            types=[str(item) for item in types] if isinstance(types, list) else [],
            raw=data,
        )

    @classmethod
    def from_map_item(cls, item: Any) -> Place | None:
        """Build a place from an on-device map item, or ``None`` if it is unusable."""

        name = getattr(item, "name", None)
        address = getattr(item, "formatted_address", None)
        if not name and not address:
            return None
        return cls(
            source="device",
            name=name,
            formatted_address=address,
            latitude=getattr(item, "latitude", None),
            longitude=getattr(item, "longitude", None),
        )


__all__ = ["Place"]
