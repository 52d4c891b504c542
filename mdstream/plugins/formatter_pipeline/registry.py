# mdstream/plugins/formatter_pipeline/registry.py
"""Formatter registry for discovery and configuration of formatter plugins.

Provides discovery of the bundled formatter plugins and configuration-based
registration, so renderers and streaming sessions build their pipelines
from the same description instead of hardcoding plugin lists.

Usage:
    from mdstream.plugins.formatter_pipeline import FormatterRegistry

    # Discover and create pipeline with defaults
    registry = FormatterRegistry()
    registry.discover()
    pipeline = registry.create_pipeline()

    # Or load from configuration file
    registry = FormatterRegistry()
    registry.discover()
    registry.load_config(".mdstream/formatters.json")
    pipeline = registry.create_pipeline()

Configuration file format (.mdstream/formatters.json):
    {
      "formatters": [
        {"name": "code_block_formatter", "config": {"highlight": false}},
        {"name": "graphic_formatter", "enabled": false},
        {"name": "paragraph_formatter", "enabled": true}
      ]
    }
"""

import importlib
import json
import logging
import os
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from .pipeline import FormatterPipeline
from .protocol import ConfigurableFormatter, FormatterPlugin

logger = logging.getLogger(__name__)

CONFIG_ENV_VAR = "MDSTREAM_FORMATTERS_CONFIG"

# Bundled formatter plugins and their module paths
KNOWN_FORMATTERS: Dict[str, str] = {
    "code_block_formatter": "mdstream.plugins.code_block_formatter",
    "graphic_formatter": "mdstream.plugins.graphic_formatter",
    "header_formatter": "mdstream.plugins.block_markdown_formatter.headers",
    "list_formatter": "mdstream.plugins.list_formatter",
    "inline_markdown_formatter": "mdstream.plugins.inline_markdown_formatter",
    "rule_formatter": "mdstream.plugins.block_markdown_formatter.rules",
    "blockquote_formatter": "mdstream.plugins.block_markdown_formatter.blockquotes",
    "paragraph_formatter": "mdstream.plugins.block_markdown_formatter.paragraphs",
}

# Default formatters to enable when no config is provided
DEFAULT_FORMATTERS: List[Dict[str, Any]] = [
    {"name": name, "enabled": True} for name in KNOWN_FORMATTERS
]


def _parse_config(data: Any, source: str) -> Optional[List[Dict[str, Any]]]:
    """Validate a loaded configuration and return its formatter entries.

    Entries that are not objects with a string name are dropped. A
    per-formatter config that is not an object, or a priority that is not
    an integer, is ignored for that formatter.

    Returns:
        The usable entries, or None when the document itself is malformed.
    """
    if not isinstance(data, dict):
        logger.warning("Formatter config %s is not an object, using defaults", source)
        return None

    formatters = data.get("formatters", [])
    if not isinstance(formatters, list):
        logger.warning("'formatters' in %s is not a list, using defaults", source)
        return None

    entries = []
    for entry in formatters:
        if not isinstance(entry, dict) or not isinstance(entry.get("name"), str):
            logger.warning("Skipping malformed formatter entry in %s: %r", source, entry)
            continue

        entry = dict(entry)
        config = entry.get("config", {})
        if not isinstance(config, dict):
            logger.warning("Ignoring config of %s in %s: not an object", entry["name"], source)
            config = {}

        priority = config.get("priority", 0)
        if isinstance(priority, bool) or not isinstance(priority, int):
            logger.warning(
                "Ignoring priority %r of %s in %s: not an integer",
                priority, entry["name"], source,
            )
            config = {k: v for k, v in config.items() if k != "priority"}

        entry["config"] = config
        entries.append(entry)

    return entries


class FormatterRegistry:
    """Registry for discovering and managing formatter plugins.

    Supports:
    - Discovery of the bundled formatter plugins
    - Configuration file loading for formatter settings
    - Pipeline creation based on enabled formatters
    - Custom formatter registration for specialized formatters
    - Wiring callbacks for formatters that need external collaborators
      (a highlighter, per-stream state)
    """

    def __init__(self):
        """Initialize the formatter registry."""
        self._discovered: Dict[str, str] = {}  # name -> module path
        self._config: List[Dict[str, Any]] = []
        self._custom_formatters: Dict[str, FormatterPlugin] = {}
        self._wiring_callbacks: Dict[str, Callable[[Any], None]] = {}

    def discover(self) -> List[str]:
        """Discover available formatter plugins.

        Scans the known formatters and verifies they can be imported.

        Returns:
            List of discovered formatter names.
        """
        self._discovered = {}

        for name, module_path in KNOWN_FORMATTERS.items():
            try:
                importlib.import_module(module_path)
            except ImportError:
                logger.warning("Formatter %s could not be imported", name)
                continue
            self._discovered[name] = module_path

        return list(self._discovered.keys())

    def list_available(self) -> List[str]:
        """List all available formatter names."""
        return list(self._discovered.keys()) + list(self._custom_formatters.keys())

    def load_config(self, config_path: str) -> bool:
        """Load formatter configuration from a JSON file.

        Args:
            config_path: Path to the configuration file.

        Returns:
            True if config was loaded successfully, False otherwise.
        """
        path = Path(config_path)
        if not path.exists():
            return False

        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except (json.JSONDecodeError, OSError) as exc:
            logger.warning("Could not read formatter config %s: %s", path, exc)
            return False

        entries = _parse_config(data, str(path))
        if entries is None:
            return False
        self._config = entries
        return True

    def load_config_from_env(self) -> bool:
        """Load the configuration file named by MDSTREAM_FORMATTERS_CONFIG.

        Returns:
            True if the variable is set and the file was loaded.
        """
        config_path = os.environ.get(CONFIG_ENV_VAR)
        if not config_path:
            return False
        return self.load_config(config_path)

    def load_config_from_dict(self, config: Dict[str, Any]) -> bool:
        """Load formatter configuration from a dictionary.

        A malformed dictionary is logged and the defaults are used instead.

        Args:
            config: Configuration dictionary with 'formatters' key.

        Returns:
            True if the configuration was usable.
        """
        entries = _parse_config(config, "config dict")
        if entries is None:
            self.use_defaults()
            return False
        self._config = entries
        return True

    def use_defaults(self) -> None:
        """Use the default formatter configuration."""
        self._config = [dict(entry) for entry in DEFAULT_FORMATTERS]

    def register_custom(self, name: str, formatter: FormatterPlugin) -> None:
        """Register a custom formatter instance.

        Custom formatters are added to every pipeline this registry creates
        unless the configuration disables them by name.

        Args:
            name: Unique name for the formatter.
            formatter: Formatter instance implementing FormatterPlugin.
        """
        self._custom_formatters[name] = formatter

    def set_wiring_callback(self, formatter_name: str, callback: Callable[[Any], None]) -> None:
        """Set a callback for wiring a formatter with external dependencies.

        Args:
            formatter_name: Name of the formatter needing wiring.
            callback: Callable that receives the formatter instance and wires it.
        """
        self._wiring_callbacks[formatter_name] = callback

    def create_pipeline(self) -> FormatterPipeline:
        """Create a formatter pipeline based on current configuration.

        If no configuration is loaded, uses defaults. Configured entries are
        merged over the defaults, so a config file only needs to mention the
        formatters it changes.

        Returns:
            Configured FormatterPipeline ready for use.
        """
        from .pipeline import create_pipeline

        pipeline = create_pipeline()
        added_names = set()
        failed_names = set()

        for entry in self._effective_config():
            name = entry.get("name")
            if not name:
                continue

            if entry.get("enabled") is False:
                continue

            try:
                formatter = self._create_formatter(name, entry.get("config", {}))
                if formatter:
                    pipeline.register(formatter)
                    added_names.add(name)
            except Exception:
                logger.exception("Could not create formatter %s, skipping it", name)
                failed_names.add(name)

        disabled_names = {
            entry.get("name")
            for entry in self._config
            if entry.get("enabled") is False
        }

        for name, formatter in self._custom_formatters.items():
            if name in added_names or name in disabled_names or name in failed_names:
                continue
            pipeline.register(formatter)

        return pipeline

    def _effective_config(self) -> List[Dict[str, Any]]:
        """Merge loaded configuration entries over the defaults by name."""
        merged: Dict[str, Dict[str, Any]] = {
            entry["name"]: dict(entry) for entry in DEFAULT_FORMATTERS
        }
        for entry in self._config:
            name = entry.get("name")
            if not name:
                continue
            merged.setdefault(name, {"name": name}).update(entry)
        return list(merged.values())

    def _create_formatter(
        self, name: str, config: Dict[str, Any]
    ) -> Optional[FormatterPlugin]:
        """Create a formatter instance by name.

        Args:
            name: Formatter name.
            config: Configuration dict for the formatter.

        Returns:
            Formatter instance or None if creation failed.
        """
        if name in self._custom_formatters:
            formatter = self._custom_formatters[name]
            if isinstance(formatter, ConfigurableFormatter):
                formatter.initialize(config)
            return formatter

        if name not in self._discovered:
            return None

        module = importlib.import_module(self._discovered[name])
        create_fn = getattr(module, "create_plugin", None)
        if not create_fn:
            logger.warning("Formatter module %s has no create_plugin()", module.__name__)
            return None

        formatter = create_fn()

        if isinstance(formatter, ConfigurableFormatter):
            formatter.initialize(config)

        # Wiring runs after initialize so injected collaborators win over config
        if name in self._wiring_callbacks:
            self._wiring_callbacks[name](formatter)

        return formatter

    def get_formatter_info(self) -> List[Dict[str, Any]]:
        """Get information about available formatters.

        Returns:
            List of dicts with name, priority, and availability status.
        """
        info = []

        for name in self.list_available():
            formatter = self._create_formatter(name, {})
            if formatter:
                info.append({
                    "name": name,
                    "priority": formatter.priority,
                    "available": True,
                })
            else:
                info.append({
                    "name": name,
                    "priority": None,
                    "available": False,
                })

        return sorted(info, key=lambda x: (x["priority"] or 999, x["name"]))


def create_registry() -> FormatterRegistry:
    """Factory function to create a FormatterRegistry instance."""
    return FormatterRegistry()


def create_default_pipeline() -> FormatterPipeline:
    """Convenience function to create a pipeline with default formatters.

    Returns:
        FormatterPipeline with default formatters registered.
    """
    registry = FormatterRegistry()
    registry.discover()
    registry.use_defaults()
    return registry.create_pipeline()
