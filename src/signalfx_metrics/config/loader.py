"""Configuration loader for signalfx-metrics.

``ConfigLoader`` resolves ``ReporterSettings`` from YAML files, JSON files,
environment variables, or auto-discovers the first available file and
overlays the environment on top.

Shipped in this module
----------------------
- ConfigLoader   — multi-source settings loader with auto-discovery
"""
from __future__ import annotations

import json
import logging
from pathlib import Path

import yaml

from signalfx_metrics.config.schema import validate_settings
from signalfx_metrics.constants import ENV_PREFIX
from signalfx_metrics.schema.config import ReporterSettings
from signalfx_metrics.schema.errors import ConfigurationError

logger = logging.getLogger(__name__)

# Ordered list of paths searched by load_auto()
_AUTO_SEARCH_PATHS: tuple[str, ...] = (
    "signalfx.yaml",
    "signalfx.yml",
    "signalfx.json",
    ".signalfx.yaml",
    ".signalfx.yml",
    ".signalfx.json",
)


class ConfigLoader:
    """Loads ``ReporterSettings`` from multiple sources.

    Every loader validates exactly once and raises ``ConfigurationError`` on
    failure, so a misconfigured reporter never starts.

    Examples
    --------
    >>> loader = ConfigLoader()
    >>> settings = loader.load_dict({"api_token": "abc"})
    >>> settings.max_datapoints_per_message
    10000
    """

    def load_dict(self, data: dict[str, object]) -> ReporterSettings:
        """Validate an in-memory mapping."""
        return validate_settings(data)

    def read_yaml(self, path: str | Path) -> dict[str, object]:
        """Parse a YAML file into a raw mapping without validating it.

        Raises
        ------
        ConfigurationError
            If the file is missing or is not valid YAML.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise ConfigurationError(
                f"YAML config file not found: {resolved}",
                context={"path": str(resolved)},
            )
        try:
            with resolved.open(encoding="utf-8") as fh:
                raw: object = yaml.safe_load(fh)
        except yaml.YAMLError as exc:
            raise ConfigurationError(
                f"Failed to parse YAML config at {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc
        return dict(raw) if isinstance(raw, dict) else {}

    def read_json(self, path: str | Path) -> dict[str, object]:
        """Parse a JSON file into a raw mapping without validating it.

        Raises
        ------
        ConfigurationError
            If the file is missing or is not valid JSON.
        """
        resolved = Path(path)
        if not resolved.exists():
            raise ConfigurationError(
                f"JSON config file not found: {resolved}",
                context={"path": str(resolved)},
            )
        try:
            with resolved.open(encoding="utf-8") as fh:
                raw = json.load(fh)
        except json.JSONDecodeError as exc:
            raise ConfigurationError(
                f"Failed to parse JSON config at {resolved}: {exc}",
                context={"path": str(resolved)},
            ) from exc
        return dict(raw) if isinstance(raw, dict) else {}

    def load_yaml(self, path: str | Path) -> ReporterSettings:
        """Load settings from a YAML file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        data = self.read_yaml(path)
        logger.debug("Loaded YAML config from %s", path)
        return validate_settings(data)

    def load_json(self, path: str | Path) -> ReporterSettings:
        """Load settings from a JSON file.

        Raises
        ------
        ConfigurationError
            If the file cannot be read or fails validation.
        """
        data = self.read_json(path)
        logger.debug("Loaded JSON config from %s", path)
        return validate_settings(data)

    def load_env(self, prefix: str = ENV_PREFIX) -> ReporterSettings:
        """Build settings from environment variables.

        See :meth:`~signalfx_metrics.schema.config.ReporterSettings.env_data`
        for variable mapping rules.
        """
        data = ReporterSettings.env_data(prefix=prefix)
        logger.debug("Loaded config from environment with prefix %r", prefix)
        return validate_settings(data)

    def load_auto(
        self,
        search_dir: str | Path | None = None,
        env_prefix: str = ENV_PREFIX,
    ) -> ReporterSettings:
        """Auto-discover and load settings.

        Discovery order:

        1. Search *search_dir* (defaults to ``cwd``) for ``signalfx.yaml``,
           ``signalfx.yml``, ``signalfx.json``, and hidden variants.  The
           first file that parses wins.
        2. Overlay environment variables from *env_prefix* on top, key by
           key; ``default_dimensions`` are merged rather than replaced.
        3. Validate the result once.

        Raises
        ------
        ConfigurationError
            If the merged settings are invalid, e.g. no token anywhere.
        """
        base_dir = Path(search_dir) if search_dir is not None else Path.cwd()
        data: dict[str, object] = {}

        for candidate_name in _AUTO_SEARCH_PATHS:
            candidate = base_dir / candidate_name
            if not candidate.exists():
                continue
            try:
                if candidate.suffix in {".yaml", ".yml"}:
                    data = self.read_yaml(candidate)
                else:
                    data = self.read_json(candidate)
                logger.info("Auto-loaded signalfx config from %s", candidate)
                break
            except ConfigurationError:
                logger.warning("Could not load config from %s; trying next.", candidate)

        env_data = ReporterSettings.env_data(prefix=env_prefix)
        if env_data:
            env_dimensions = env_data.pop("default_dimensions", None)
            if isinstance(env_dimensions, dict):
                file_dimensions = data.get("default_dimensions")
                merged = dict(file_dimensions) if isinstance(file_dimensions, dict) else {}
                merged.update(env_dimensions)
                data["default_dimensions"] = merged
            data.update(env_data)
            logger.debug("Applied environment variable overlay.")

        return validate_settings(data)
