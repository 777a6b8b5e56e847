#!/usr/bin/env python3
"""
Host configuration loader with multi-layer merging.

Layers (low to high priority):
1. HostConfig defaults
2. User file (--host-config-file)
3. User JSON string (--host-config)
4. Individual CLI flags (--cpus, --memory, ...)

Copyright (c) Advanced Micro Devices, Inc. All rights reserved.
"""

import json
import logging
from dataclasses import fields
from typing import Any, Dict, List, Optional, Tuple

from singularity_driver.core.config import Bind, HostConfig
from singularity_driver.core.errors import ConfigurationError, create_error_context
from singularity_driver.core.translator import validate_host_config

LOGGER = logging.getLogger(__name__)

HOST_CONFIG_KEYS = tuple(f.name for f in fields(HostConfig))


def parse_bind(text: str) -> Bind:
    """Parse ``host:container`` (or a bare ``path`` mounted at the same place)."""
    host_path, sep, container_path = text.partition(":")
    if not sep:
        container_path = host_path
    if not host_path or not container_path:
        raise ConfigurationError(
            f"Invalid bind `{text}`, expected HOST_PATH:CONTAINER_PATH",
            context=create_error_context(operation="parse_bind"),
        )
    return host_path, container_path


def parse_env(text: str) -> Tuple[str, str]:
    """Parse ``NAME=VALUE``; the value may itself contain ``=``."""
    name, sep, value = text.partition("=")
    if not sep or not name:
        raise ConfigurationError(
            f"Invalid environment variable `{text}`, expected NAME=VALUE",
            context=create_error_context(operation="parse_env"),
        )
    return name, value


class ConfigLoader:
    """Build a HostConfig from JSON files, JSON strings and overrides."""

    @classmethod
    def load_file(cls, path: str) -> Dict[str, Any]:
        """
        Load a host configuration JSON file.

        Raises:
            ConfigurationError: If the file is missing or not a JSON object.
        """
        context = create_error_context(operation="load_host_config", file_path=path)
        try:
            with open(path, "r") as f:
                data = json.load(f)
        except FileNotFoundError as e:
            raise ConfigurationError(
                f"Host config file not found: {path}", context=context, cause=e
            ) from e
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in {path}: {e}", context=context, cause=e
            ) from e
        return cls._require_object(data, context)

    @classmethod
    def load_string(cls, text: str) -> Dict[str, Any]:
        """Parse a host configuration given as a JSON string."""
        context = create_error_context(operation="load_host_config")
        try:
            data = json.loads(text)
        except json.JSONDecodeError as e:
            raise ConfigurationError(
                f"Invalid JSON in host config: {e}",
                context=context,
                cause=e,
                suggestions=['Example: \'{"cpus": 2, "memory": 4294967296}\''],
            ) from e
        return cls._require_object(data, context)

    @staticmethod
    def _require_object(data: Any, context) -> Dict[str, Any]:
        if not isinstance(data, dict):
            raise ConfigurationError(
                "Host config must be a JSON object", context=context
            )
        return data

    @staticmethod
    def merge(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
        """Shallow merge. Override wins conflicts."""
        result = dict(base)
        result.update(override)
        return result

    @classmethod
    def _normalize_binds(cls, binds: Any) -> Optional[List[Bind]]:
        if binds is None:
            return None
        if not isinstance(binds, list):
            raise ConfigurationError("binds must be a list")
        result = []
        for entry in binds:
            if isinstance(entry, str):
                result.append(parse_bind(entry))
            elif isinstance(entry, (list, tuple)) and len(entry) == 2:
                result.append((str(entry[0]), str(entry[1])))
            else:
                raise ConfigurationError(
                    f"Invalid bind entry {entry!r}, expected \"host:container\" or [host, container]"
                )
        return result

    @classmethod
    def build_host_config(cls, config: Dict[str, Any]) -> HostConfig:
        """
        Create a HostConfig from a merged configuration dictionary.

        Keys absent from the dictionary keep their HostConfig defaults; an
        explicit JSON null clears an optional limit.

        Raises:
            ConfigurationError: On unknown keys, wrong types or invalid values.
        """
        unknown = sorted(set(config) - set(HOST_CONFIG_KEYS))
        if unknown:
            raise ConfigurationError(
                f"Unknown host config keys: {', '.join(unknown)}",
                suggestions=[f"Valid keys: {', '.join(HOST_CONFIG_KEYS)}"],
            )

        values = dict(config)
        if "binds" in values:
            values["binds"] = cls._normalize_binds(values["binds"])
        if "contain_all" in values and not isinstance(values["contain_all"], bool):
            raise ConfigurationError("contain_all must be true or false")

        host_config = HostConfig(**values)
        validate_host_config(host_config)
        LOGGER.debug("Host config: %s", host_config)
        return host_config

    @classmethod
    def load(
        cls,
        host_config: Optional[str] = None,
        host_config_file: Optional[str] = None,
        overrides: Optional[Dict[str, Any]] = None,
    ) -> HostConfig:
        """Load and merge every layer into a HostConfig."""
        config: Dict[str, Any] = {}
        if host_config_file:
            config = cls.merge(config, cls.load_file(host_config_file))
        if host_config:
            config = cls.merge(config, cls.load_string(host_config))
        if overrides:
            # unset CLI flags come through as None
            config = cls.merge(
                config, {key: value for key, value in overrides.items() if value is not None}
            )
        return cls.build_host_config(config)
