'''
Static typing protocols for serializing parameter records.
'''

import dataclasses
from enum import Enum
from typing import Any, Protocol, Self, cast


__all__ = ['JSONSerializable']


def _json_value(value: Any) -> Any:
    if isinstance(value, Enum):
        return value.value
    return value


def _json_dict(items: list[tuple[str, Any]]) -> dict[str, Any]:
    return {key: _json_value(val) for key, val in items}


class JSONSerializable(Protocol):
    '''
    Parameter record that can be stored as a JSON object.

    Dataclasses get a default implementation: fields are written by
    name, enumeration members by value. Reading ignores keys that are
    not fields so that records from newer versions still load.
    '''

    def toJSON(self) -> dict | list:
        '''Serialize the object into a JSON-compatible object.'''
        if dataclasses.is_dataclass(self):
            return dataclasses.asdict(self, dict_factory=_json_dict)
        raise NotImplementedError()

    @classmethod
    def fromJSON(cls, obj: dict | list) -> Self:
        '''Deserialize an object from JSON data.'''
        if isinstance(obj, list):
            return cast(Self, cls(*obj))
        if dataclasses.is_dataclass(cls):
            names = {f.name for f in dataclasses.fields(cls) if f.init}
            obj = {key: val for key, val in obj.items() if key in names}
        return cast(Self, cls(**obj))
