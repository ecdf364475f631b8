from __future__ import annotations

from collections.abc import Mapping


def field_value(record: object, name: str, default: object = None) -> object:
    """Read ``name`` from a plain dict row or from a model instance."""
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)
