# document/properties.py

from enum import Enum
from typing import Any, Dict, Iterator, Mapping, Optional

from rich.color_triplet import ColorTriplet


class DisplayLocation(Enum):
    """Where a line should be shown when more than one view is available."""
    CURRENT = 'current'
    SOURCE = 'source'


class DisplayProperty(Enum):
    """Per-line display overrides and the type each one carries."""
    FOREGROUND_COLOUR = ('foreground', ColorTriplet)
    BACKGROUND_COLOUR = ('background', ColorTriplet)
    DO_NOT_DISPLAY = ('do_not_display', bool)
    DISPLAY_LOCATION = ('display_location', DisplayLocation)

    def __init__(self, key: str, value_type: type):
        self.key = key
        self.value_type = value_type


class DisplayPropertyMap(Mapping):
    """
    Sparse, immutable mapping of display properties to values.

    Values are checked against the property's declared type when the map is
    built; a mismatch raises TypeError.
    """

    def __init__(self, properties: Optional[Mapping[DisplayProperty, Any]] = None, **kwargs):
        values: Dict[DisplayProperty, Any] = {}
        items = list((properties or {}).items())
        items += [(DisplayProperty[name.upper()], value) for name, value in kwargs.items()]
        for prop, value in items:
            if not isinstance(prop, DisplayProperty):
                raise TypeError(f"Not a display property: {prop!r}")
            if not isinstance(value, prop.value_type):
                raise TypeError(
                    f"{prop.name} expects {prop.value_type.__name__}, got {type(value).__name__}")
            values[prop] = value
        self._values = values

    def __getitem__(self, prop: DisplayProperty) -> Any:
        return self._values[prop]

    def __iter__(self) -> Iterator[DisplayProperty]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __hash__(self) -> int:
        return hash(frozenset(self._values.items()))

    def __repr__(self) -> str:
        inner = ', '.join(f"{p.name}={v!r}" for p, v in self._values.items())
        return f"DisplayPropertyMap({inner})"

    def has(self, prop: DisplayProperty) -> bool:
        return prop in self._values

    def with_property(self, prop: DisplayProperty, value: Any) -> 'DisplayPropertyMap':
        """Return a copy with ``prop`` set to ``value``."""
        values = dict(self._values)
        values[prop] = value
        return DisplayPropertyMap(values)


EMPTY_PROPERTIES = DisplayPropertyMap()
