from __future__ import annotations

from dataclasses import dataclass, field
from typing import Callable, Iterable

from .models import ExerciseMeta, InlineMeta, RawRow


LABEL_COLUMN = "label"
UNITS_COLUMN = "units"
DEFAULT_UNITS = ""


@dataclass(frozen=True)
class MetaContext:
    key: str
    descriptor_meta: InlineMeta | None = None
    inline_meta: InlineMeta = field(default_factory=InlineMeta)
    display_label: str | None = None


FieldStrategy = Callable[[MetaContext], "str | None"]


def _text(value: object) -> str | None:
    if value is None:
        return None
    text = str(value).strip()
    return text or None


def extract_inline_meta(rows: Iterable[RawRow] | None) -> InlineMeta:
    label: str | None = None
    units: str | None = None
    for row in rows or []:
        if not isinstance(row, dict):
            continue
        label = label or _text(row.get(LABEL_COLUMN))
        units = units or _text(row.get(UNITS_COLUMN))
        if label and units:
            break
    return InlineMeta(label=label, units=units)


def fallback_label(key: str) -> str:
    return str(key).replace("_", " ")


def _descriptor_label(context: MetaContext) -> str | None:
    return _text(context.descriptor_meta.label) if context.descriptor_meta else None


def _descriptor_units(context: MetaContext) -> str | None:
    return _text(context.descriptor_meta.units) if context.descriptor_meta else None


def _inline_label(context: MetaContext) -> str | None:
    return _text(context.inline_meta.label)


def _inline_units(context: MetaContext) -> str | None:
    return _text(context.inline_meta.units)


def _display_label(context: MetaContext) -> str | None:
    return _text(context.display_label)


def _key_label(context: MetaContext) -> str | None:
    return fallback_label(context.key)


def _default_units(context: MetaContext) -> str | None:
    return DEFAULT_UNITS


LABEL_STRATEGIES: tuple[FieldStrategy, ...] = (
    _descriptor_label,
    _inline_label,
    _display_label,
    _key_label,
)

UNITS_STRATEGIES: tuple[FieldStrategy, ...] = (
    _descriptor_units,
    _inline_units,
    _default_units,
)


def first_resolved(strategies: Iterable[FieldStrategy], context: MetaContext) -> str | None:
    for strategy in strategies:
        resolved = strategy(context)
        if resolved is not None:
            return resolved
    return None


def resolve_meta(
    key: str,
    *,
    descriptor_meta: InlineMeta | None = None,
    rows: Iterable[RawRow] | None = None,
    display_label: str | None = None,
) -> ExerciseMeta:
    context = MetaContext(
        key=key,
        descriptor_meta=descriptor_meta,
        inline_meta=extract_inline_meta(rows),
        display_label=display_label,
    )
    label = first_resolved(LABEL_STRATEGIES, context) or fallback_label(key) or key
    units = first_resolved(UNITS_STRATEGIES, context) or DEFAULT_UNITS
    return ExerciseMeta(key=key, label=label, units=units)
