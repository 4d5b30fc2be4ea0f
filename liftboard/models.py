from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


RawRow = dict[str, str]


@dataclass(frozen=True)
class DataPoint:
    timestamp: str
    value: float
    video_ref: str | None = None


Series = list[DataPoint]


@dataclass(frozen=True)
class InlineMeta:
    label: str | None = None
    units: str | None = None


@dataclass(frozen=True)
class ExerciseMeta:
    key: str
    label: str
    units: str


@dataclass(frozen=True)
class SourceDescriptor:
    key: str
    fetch_location: str
    inline_meta: InlineMeta | None = None


def _optional_text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


@dataclass(frozen=True)
class ManifestEntry:
    key: str
    file: str
    url: str
    label: str | None = None
    units: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "file": self.file,
            "url": self.url,
            "label": self.label,
            "units": self.units,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "ManifestEntry | None":
        key = _optional_text(payload.get("key"))
        if key is None:
            return None
        return cls(
            key=key,
            file=_optional_text(payload.get("file")) or "",
            url=_optional_text(payload.get("url")) or "",
            label=_optional_text(payload.get("label")),
            units=_optional_text(payload.get("units")),
        )


@dataclass(frozen=True)
class ExerciseEntry:
    key: str
    display_label: str
    display_units: str
    labels: list[str] = field(default_factory=list)
    values: list[float] = field(default_factory=list)
    embed_url: str | None = None

    @property
    def chart_label(self) -> str:
        if self.display_units:
            return f"{self.display_label} ({self.display_units})"
        return self.display_label

    def to_dict(self) -> dict[str, Any]:
        return {
            "key": self.key,
            "labels": list(self.labels),
            "values": list(self.values),
            "display_label": self.display_label,
            "display_units": self.display_units,
            "chart_label": self.chart_label,
            "embed_url": self.embed_url or "",
        }
