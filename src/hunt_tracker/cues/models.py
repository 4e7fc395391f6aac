"""Map cue table models."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field, field_validator

DEFAULT_CUES: dict[str, str] = {
    "creek": "assets/creek.mp3",
    "cemetery": "assets/cemetery.mp3",
    "civilwar": "assets/civilwar.mp3",
}


def map_key(level_name: str) -> str | None:
    """Return the lower-cased second segment of ``category/name`` level ids."""

    parts = level_name.strip().lower().split("/")
    if len(parts) < 2 or not parts[1]:
        return None
    return parts[1]


class CueTable(BaseModel):
    """Sound asset to play when a given map starts loading."""

    cues: dict[str, str] = Field(
        default_factory=dict,
        description="Map name (second level id segment) to sound asset.",
    )

    @field_validator("cues", mode="before")
    @classmethod
    def _normalize_keys(cls, value: Any):
        if value is None:
            return {}
        if not isinstance(value, dict):
            raise ValueError("cues must be a mapping of map name to asset")
        normalized: dict[str, str] = {}
        for key, asset in value.items():
            name = str(key).strip().lower()
            if not name:
                raise ValueError("Cue map names must not be empty")
            normalized[name] = asset
        return normalized

    @classmethod
    def default(cls) -> "CueTable":
        return cls(cues=DEFAULT_CUES)

    def resolve(self, level_name: str) -> str | None:
        key = map_key(level_name)
        if key is None:
            return None
        return self.cues.get(key)

    def merged(self, other: "CueTable") -> "CueTable":
        return CueTable(cues={**self.cues, **other.cues})


__all__ = ["CueTable", "DEFAULT_CUES", "map_key"]
