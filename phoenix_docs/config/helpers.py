"""Utility helpers shared by the docs configuration loader."""

from __future__ import annotations

import dataclasses as dc
import functools
import logging
import typing as typ

import msgspec

from .models import DocsConfig

if typ.TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger(__name__)

_MISSING = object()


@functools.cache
def _config_field_types() -> dict[str, typ.Any]:
    """Return the declared type of every ``DocsConfig`` field, in field order."""
    hints = typ.get_type_hints(DocsConfig)
    return {field.name: hints[field.name] for field in dc.fields(DocsConfig)}


def _convert_field(
    name: str, value: object, expected: typ.Any, *, path: Path
) -> object:
    """Convert a raw JSON value to ``expected`` or return ``_MISSING``.

    Invalid values are reported through the module logger and replaced by the
    caller's default, so one bad field never discards the rest of the file.
    """
    try:
        return msgspec.convert(value, expected)
    except msgspec.ValidationError as exc:
        logger.warning("Ignoring invalid '%s' in %s: %s", name, path, exc)
        return _MISSING


def _coerce_fields(raw: typ.Mapping[str, typ.Any], *, path: Path) -> dict[str, object]:
    """Return the subset of ``raw`` that converts cleanly to ``DocsConfig`` fields."""
    resolved: dict[str, object] = {}
    for name, expected in _config_field_types().items():
        if name not in raw:
            continue
        value = _convert_field(name, raw[name], expected, path=path)
        if value is not _MISSING:
            resolved[name] = value
    unknown = sorted(set(raw) - set(_config_field_types()))
    if unknown:
        logger.debug("Unrecognised keys in %s: %s", path, ", ".join(unknown))
    return resolved


__all__ = ["_coerce_fields", "_config_field_types", "_convert_field"]
