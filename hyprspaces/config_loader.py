"""Configuration file loading utilities.

This module handles loading, parsing, and merging the TOML configuration files.
"""

from __future__ import annotations

import os
import tomllib
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiofiles
import aiofiles.os

from .constants import CONFIG_FILE
from .models import ConfigError
from .utils import merge

if TYPE_CHECKING:
    import logging

__all__ = ["ConfigLoader"]


class ConfigLoader:
    """Handles loading and merging configuration files.

    Supports:
    - A single TOML configuration file
    - Directory-based config (multiple .toml files merged)
    - `include` directives (in the `[hyprspaces]` section) for modular configuration
    """

    def __init__(self, log: logging.Logger) -> None:
        """Initialize the config loader.

        Args:
            log: Logger instance for status and error messages
        """
        self.log = log
        self._config: dict[str, Any] = {}

    @property
    def config(self) -> dict[str, Any]:
        """Return the loaded configuration."""
        return self._config

    async def load(self, config_filename: str = "") -> dict[str, Any]:
        """Load configuration from file or directory, replacing the previous one.

        Args:
            config_filename: Optional path to config file or directory.
                           If empty, uses default CONFIG_FILE location.

        Returns:
            The loaded and merged configuration dictionary.

        Raises:
            ConfigError: If config file not found or has syntax errors.
        """
        self._config = await self._open_config(config_filename)
        return self._config

    async def _open_config(self, config_filename: str = "") -> dict[str, Any]:
        fname = Path(os.path.expandvars(config_filename)).expanduser() if config_filename else CONFIG_FILE
        if await aiofiles.os.path.isdir(fname):
            return await self._load_config_directory(fname)

        config = await self._load_config_file(fname)

        for extra_config in list(config.get("hyprspaces", {}).get("include", [])):
            merge(config, await self._open_config(extra_config))

        return config

    async def _load_config_directory(self, directory: Path) -> dict[str, Any]:
        """Load and merge all .toml files from a directory, in name order."""
        config: dict[str, Any] = {}
        for toml_file in sorted(await aiofiles.os.listdir(directory)):
            if not toml_file.endswith(".toml"):
                continue
            merge(config, await self._load_config_file(directory / toml_file))
        return config

    async def _load_config_file(self, fname: Path) -> dict[str, Any]:
        """Load a single configuration file.

        Raises:
            ConfigError: If file not found or has syntax errors
        """
        if not await aiofiles.os.path.exists(fname):
            self.log.critical("Config file not found! Please create %s", fname)
            raise ConfigError(str(fname))

        self.log.info("Loading %s", fname)
        async with aiofiles.open(fname, encoding="utf-8") as f:
            content = await f.read()
        try:
            return tomllib.loads(content)
        except tomllib.TOMLDecodeError as e:
            self.log.critical("Problem reading %s: %s", fname, e)
            raise ConfigError(str(fname)) from e
