# messages/colours.py

import logging
import threading
from typing import Dict, List, Optional

from rich.color import Color, ColorParseError
from rich.color_triplet import ColorTriplet

from ..config import ConfigProvider

WHITE = ColorTriplet(255, 255, 255)

# The 16 standard IRC colours
DEFAULT_COLOURS = (
    WHITE,
    ColorTriplet(0, 0, 0),
    ColorTriplet(0, 0, 127),
    ColorTriplet(0, 141, 0),
    ColorTriplet(255, 0, 0),
    ColorTriplet(127, 0, 0),
    ColorTriplet(160, 15, 160),
    ColorTriplet(252, 127, 0),
    ColorTriplet(255, 255, 0),
    ColorTriplet(0, 252, 0),
    ColorTriplet(0, 128, 128),
    ColorTriplet(0, 255, 255),
    ColorTriplet(0, 0, 255),
    ColorTriplet(255, 0, 255),
    ColorTriplet(128, 128, 128),
    ColorTriplet(192, 192, 192),
)

COLOUR_DOMAIN = 'colour'


class ColourResolver:
    """
    Turns colour specifications into RGB colours.

    A specification is either a palette index (0-15) or a six digit hex
    string. The palette starts out as the standard IRC colours and any slot
    can be overridden through the ``colour`` config domain.
    """

    def __init__(self, config: Optional[ConfigProvider] = None, logger=None):
        self.config = config
        self.logger = logger or logging.getLogger(__name__)
        self._cache: Dict[str, ColorTriplet] = {}
        self._lock = threading.Lock()
        self._palette: List[ColorTriplet] = list(DEFAULT_COLOURS)
        self._subscription = None

        if config is not None:
            self._subscription = config.add_change_listener(
                COLOUR_DOMAIN, None, lambda domain, key: self.init_colours())
            self.init_colours()

    def init_colours(self) -> None:
        """Re-read palette overrides; unset slots revert to the defaults."""
        for i in range(16):
            key = str(i)
            spec = self.config.get_option(COLOUR_DOMAIN, key) if self.config else None
            colour = DEFAULT_COLOURS[i] if spec is None else self.from_hex(str(spec))
            with self._lock:
                if self._palette[i] != colour:
                    self._palette[i] = colour
                # Only the numeric specs depend on the palette
                for cached in [k for k in self._cache if len(k) < 3 and k.isdigit() and int(k) == i]:
                    del self._cache[cached]

    def from_index(self, index: int) -> ColorTriplet:
        """Return palette slot ``index``, or white if it is out of range."""
        if 0 <= index <= 15:
            with self._lock:
                return self._palette[index]
        self.logger.warning(f"Invalid colour index: {index}")
        return WHITE

    def from_hex(self, hex_string: str) -> ColorTriplet:
        """Parse an ``RRGGBB`` string, or return white if it is malformed."""
        with self._lock:
            if hex_string in self._cache:
                return self._cache[hex_string]

        colour = None
        if len(hex_string) == 6:
            try:
                colour = Color.parse('#' + hex_string).get_truecolor()
            except ColorParseError:
                colour = None

        if colour is None:
            self.logger.warning(f"Invalid colour #{hex_string}")
            return WHITE

        with self._lock:
            self._cache[hex_string] = colour
        return colour

    def from_spec(self, spec: Optional[str], fallback: Optional[ColorTriplet] = WHITE) -> Optional[ColorTriplet]:
        """
        Resolve a palette index or hex specification.

        Args:
            spec: A number from 0 to 15, or six hex digits
            fallback: Returned when the spec can't be resolved; may be None

        Returns:
            The resolved colour, or the fallback
        """
        if spec is not None:
            with self._lock:
                if spec in self._cache:
                    return self._cache[spec]

        colour = None
        if spec is not None:
            if len(spec) < 3:
                if spec.isdigit() and 0 <= int(spec) <= 15:
                    colour = self.from_index(int(spec))
            elif len(spec) == 6:
                colour = self.from_hex(spec)

        if colour is None:
            self.logger.warning(f"Invalid colour format: {spec}")
            return fallback

        with self._lock:
            self._cache[spec] = colour
        return colour

    @staticmethod
    def to_hex(colour: ColorTriplet) -> str:
        """Format a colour as upper-case ``RRGGBB``."""
        return colour.hex[1:].upper()

    def close(self) -> None:
        if self._subscription is not None:
            self._subscription.cancel()
            self._subscription = None
