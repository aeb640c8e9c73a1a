"""Option objects accepted by record save and serialize calls."""
from __future__ import annotations

import dataclasses
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Union

from translatable.errors import InvalidOptionsError

INSERT = "insert"
UPDATE = "update"


def _known_fields(cls, value: Mapping[str, Any]) -> Dict[str, Any]:
    data = dict(value)
    unknown = sorted(set(data) - {f.name for f in dataclasses.fields(cls)})
    if unknown:
        raise InvalidOptionsError(cls.__name__, unknown)
    return data


@dataclass
class SaveOptions:
    method: Optional[str] = None
    patch: bool = False
    # Raise when an update matches no row
    require: bool = True

    @classmethod
    def coerce(cls, value: Union["SaveOptions", Mapping[str, Any], None]) -> "SaveOptions":
        """Return a fresh copy so callers' options are never mutated."""
        if value is None:
            return cls()
        if isinstance(value, cls):
            return dataclasses.replace(value)
        return cls(**_known_fields(cls, value))


@dataclass
class SerializeOptions:
    include: Optional[frozenset] = None
    exclude: frozenset = frozenset()

    @classmethod
    def coerce(cls, value: Union["SerializeOptions", Mapping[str, Any], None]) -> "SerializeOptions":
        if value is None:
            return cls()
        if isinstance(value, cls):
            return value
        data = _known_fields(cls, value)
        if data.get("include") is not None:
            data["include"] = frozenset(data["include"])
        if "exclude" in data:
            data["exclude"] = frozenset(data["exclude"] or ())
        return cls(**data)
