"""
Schema validation for record saves.

Full saves validate every declared field. Partial saves (patches and updates
of existing rows) validate only the keys present, with every other field
relaxed to optional.
"""
from __future__ import annotations

from functools import lru_cache
from typing import Any, Dict, FrozenSet, Mapping, Type

from pydantic import BaseModel, ValidationError, create_model

from translatable.errors import RecordValidationError


@lru_cache(maxsize=None)
def partial_schema(schema: Type[BaseModel], optional_keys: FrozenSet[str]) -> Type[BaseModel]:
    """Return ``schema`` with ``optional_keys`` given a ``None`` default."""
    overrides = {
        name: (field.annotation, None)
        for name, field in schema.model_fields.items()
        if name in optional_keys and field.is_required()
    }
    if not overrides:
        return schema
    return create_model(f"{schema.__name__}Patch", __base__=schema, **overrides)


def validate_attributes(
    schema: Type[BaseModel],
    attrs: Mapping[str, Any],
    *,
    table_name: str,
    partial: bool = False,
) -> Dict[str, Any]:
    """Validate ``attrs`` and return the coerced values that were supplied."""
    model = schema
    if partial:
        present = frozenset(attrs)
        model = partial_schema(schema, frozenset(schema.model_fields) - present)
    try:
        validated = model.model_validate(dict(attrs))
    except ValidationError as exc:
        raise RecordValidationError(table_name, exc.errors()) from exc
    # Unknown keys pass through untouched; declared ones come back coerced
    values = dict(attrs)
    values.update(validated.model_dump(exclude_unset=True))
    return values
