# __init__.py

from .config import ConfigError, ConfigProvider
from .logger import Logger
from .interface import TextPane

__all__ = ["TextPane", "ConfigProvider", "ConfigError", "Logger"]
