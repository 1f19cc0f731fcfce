"""
tsestree Settings

Configuration management using pydantic settings.
Loads from environment variables with TSESTREE_ prefix.
"""

import logging
import re
import sys
from typing import Dict, FrozenSet, Iterable, List

from pydantic import computed_field
from pydantic_settings import BaseSettings, SettingsConfigDict


# Debug module name -> logger that it switches to DEBUG
DEBUG_LOGGERS: Dict[str, str] = {
    "typescript-eslint": "tsestree",
    "typescript": "tsestree.compiler",
    "eslint": "eslint",
}


class Settings(BaseSettings):
    """
    Process-level settings.

    Environment variables:
    - TSESTREE_DEBUG: Comma-separated debug modules, e.g. "typescript-eslint:*,typescript"
    """

    model_config = SettingsConfigDict(
        env_prefix="TSESTREE_",
        env_file=".env",
        extra="ignore",
    )

    # Raw string for comma-separated debug modules
    debug: str = ""

    @computed_field
    @property
    def debug_modules(self) -> List[str]:
        """Known debug modules named in TSESTREE_DEBUG."""
        modules = []
        for entry in re.split(r"[\s,]+", self.debug.strip()):
            name = entry.split(":", 1)[0]
            if name in DEBUG_LOGGERS and name not in modules:
                modules.append(name)
        return modules


def get_settings() -> Settings:
    """Read settings from the current environment."""
    return Settings()


def configure_debug_logging(modules: Iterable[str]) -> FrozenSet[str]:
    """
    Switch the loggers behind the given debug modules to DEBUG.

    A stderr handler is attached only when nothing else would print the
    records (no handler on the logger and none on the root logger).

    Returns:
        The set of modules that were enabled.
    """
    enabled = frozenset(m for m in modules if m in DEBUG_LOGGERS)
    for module in sorted(enabled):
        module_logger = logging.getLogger(DEBUG_LOGGERS[module])
        module_logger.setLevel(logging.DEBUG)
        if not module_logger.handlers and not logging.getLogger().handlers:
            handler = logging.StreamHandler(sys.stderr)
            handler.setFormatter(logging.Formatter("%(name)s %(levelname)s: %(message)s"))
            module_logger.addHandler(handler)
    return enabled
