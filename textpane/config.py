# config.py

import json
import threading
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, Optional, Union

from .events import ListenerList, Subscription


class ConfigError(ValueError):
    """Raised when a configuration source cannot be read."""


DEFAULT_OPTIONS: Dict[str, Dict[str, Any]] = {
    'ui': {
        'frameBufferSize': 0,
        'stylelinks': True,
        'stylechannels': True,
        'linkcolour': '0000FF',
        'channelcolour': '0000FF',
        'textPaneFontName': 'Monospaced',
        'textPaneFontSize': 12,
        'timestamp': '[%H:%M:%S] ',
    },
    'colour': {},
    'icon': {},
}


@dataclass(eq=False)
class _ChangeListener:
    """Binds a callback to a domain and an optional key."""
    domain: str
    key: Optional[str]
    callback: Callable[[str, str], None]

    def config_changed(self, domain: str, key: str) -> None:
        if domain == self.domain and (self.key is None or key == self.key):
            self.callback(domain, key)


class ConfigProvider:
    """
    Key/value configuration store organised by domain.

    Options set explicitly shadow the defaults. Every change notifies the
    listeners registered for that domain (and key, if one was given).
    """

    def __init__(self, options: Optional[Dict[str, Dict[str, Any]]] = None,
                 defaults: Optional[Dict[str, Dict[str, Any]]] = None):
        self._defaults = {d: dict(v) for d, v in (defaults if defaults is not None else DEFAULT_OPTIONS).items()}
        self._options: Dict[str, Dict[str, Any]] = {}
        self._lock = threading.Lock()
        self._listeners = ListenerList()
        for domain, values in (options or {}).items():
            self._options[domain] = dict(values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> 'ConfigProvider':
        """Load options from a JSON file of the form {domain: {key: value}}."""
        try:
            with open(path, 'r', encoding='utf-8') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigError(f"Could not read config file {path}: {e}") from e
        if not isinstance(data, dict) or not all(isinstance(v, dict) for v in data.values()):
            raise ConfigError(f"Config file {path} must map domains to objects")
        return cls(options=data)

    def has_option(self, domain: str, key: str) -> bool:
        with self._lock:
            return key in self._options.get(domain, {}) or key in self._defaults.get(domain, {})

    def get_option(self, domain: str, key: str, fallback: Any = None) -> Any:
        with self._lock:
            if key in self._options.get(domain, {}):
                return self._options[domain][key]
            return self._defaults.get(domain, {}).get(key, fallback)

    def get_option_bool(self, domain: str, key: str, fallback: bool = False) -> bool:
        value = self.get_option(domain, key)
        if value is None:
            return fallback
        if isinstance(value, str):
            return value.strip().lower() in ('true', 'yes', '1', 'on')
        return bool(value)

    def get_option_int(self, domain: str, key: str, fallback: Optional[int] = None) -> Optional[int]:
        value = self.get_option(domain, key)
        if value is None or isinstance(value, bool):
            return fallback
        try:
            return int(value)
        except (TypeError, ValueError):
            return fallback

    def get_options(self, domain: str) -> Dict[str, Any]:
        """Return the merged defaults and explicit options of a domain."""
        with self._lock:
            merged = dict(self._defaults.get(domain, {}))
            merged.update(self._options.get(domain, {}))
            return merged

    def set_option(self, domain: str, key: str, value: Any) -> None:
        with self._lock:
            self._options.setdefault(domain, {})[key] = value
        self._listeners.fire('config_changed', domain, key)

    def unset_option(self, domain: str, key: str) -> None:
        with self._lock:
            removed = self._options.get(domain, {}).pop(key, None) is not None
        if removed:
            self._listeners.fire('config_changed', domain, key)

    def add_change_listener(self, domain: str, key: Optional[str],
                            callback: Callable[[str, str], None]) -> Subscription:
        """
        Register a callback for changes in a domain.

        Args:
            domain: Domain to watch
            key: Key to watch, or None for every key in the domain
            callback: Called with (domain, key) after the change

        Returns:
            Subscription handle for removing the listener
        """
        return self._listeners.add(_ChangeListener(domain, key, callback))
