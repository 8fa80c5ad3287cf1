"""
Plugin Manager.

Keeps the registered language plugins and routes each source file to the
plugin that owns its extension. Extensions are matched case-insensitively;
when two plugins claim the same extension, the one registered last wins.
"""

import logging
from pathlib import Path, PurePath
from typing import Any, Dict, List, Optional

import yaml

from plugins.base import LanguagePlugin

logger = logging.getLogger(__name__)

REQUIRED_CONFIG_FIELDS = ('name', 'version', 'file_extensions')

CONFIG_FILE_NAME = "config.yaml"


def normalize_extension(ext: str) -> str:
    ext = ext.strip().lower()
    return ext if ext.startswith('.') else f".{ext}"


class PluginManager:
    """Registry of language plugins indexed by language and file extension."""

    def __init__(self):
        self._plugins: Dict[str, LanguagePlugin] = {}
        self._owners: Dict[str, str] = {}  # extension -> language
        self._configs: Dict[Path, Dict[str, Any]] = {}

    def register_plugin(self, plugin: LanguagePlugin) -> None:
        """
        Add a plugin and claim its extensions.

        A plugin registered under an existing language name replaces the
        previous one.
        """
        language = plugin.language_name
        if language in self._plugins:
            logger.warning(f"Replacing the '{language}' plugin")
            self._release_extensions(language)
        self._plugins[language] = plugin

        claimed = [normalize_extension(ext) for ext in plugin.file_extensions]
        for ext in claimed:
            owner = self._owners.get(ext)
            if owner is not None and owner != language:
                logger.warning(f"'{language}' takes over {ext} files from '{owner}'")
            self._owners[ext] = language

        logger.info(f"Registered '{language}' plugin for {', '.join(claimed)}")

    def unregister_plugin(self, language_name: str) -> bool:
        """
        Remove a plugin and release the extensions it still owns.

        Returns:
            False if no plugin was registered under ``language_name``
        """
        if self._plugins.pop(language_name, None) is None:
            return False
        self._release_extensions(language_name)
        logger.info(f"Unregistered '{language_name}' plugin")
        return True

    def _release_extensions(self, language: str) -> None:
        for ext in [e for e, owner in self._owners.items() if owner == language]:
            del self._owners[ext]

    def get_plugin_for_file(self, file_path: str) -> Optional[LanguagePlugin]:
        """Plugin owning the extension of ``file_path``, or None."""
        suffix = PurePath(file_path).suffix
        language = self._owners.get(normalize_extension(suffix)) if suffix else None
        if language is None:
            logger.debug(f"No language plugin handles {file_path}")
            return None
        return self._plugins[language]

    def get_plugin(self, language_name: str) -> Optional[LanguagePlugin]:
        return self._plugins.get(language_name)

    def list_supported_languages(self) -> List[str]:
        return list(self._plugins)

    def list_supported_extensions(self) -> List[str]:
        return list(self._owners)

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "total_plugins": len(self._plugins),
            "total_extensions": len(self._owners),
            "languages": self.list_supported_languages(),
        }

    def load_plugin_config(self, plugin_dir: Path) -> Dict[str, Any]:
        """
        Read ``config.yaml`` from a plugin directory.

        The parsed configuration is cached per file.

        Args:
            plugin_dir: Directory holding the plugin's config.yaml

        Returns:
            Configuration mapping

        Raises:
            FileNotFoundError: If config.yaml does not exist
            yaml.YAMLError: If config.yaml is not valid YAML
            ValueError: If a required field is missing
        """
        config_path = Path(plugin_dir) / CONFIG_FILE_NAME
        cached = self._configs.get(config_path)
        if cached is not None:
            return cached

        if not config_path.is_file():
            raise FileNotFoundError(f"Plugin configuration not found: {config_path}")

        try:
            config = yaml.safe_load(config_path.read_text(encoding='utf-8')) or {}
        except yaml.YAMLError as e:
            logger.error(f"Invalid plugin configuration {config_path}: {e}")
            raise

        missing = [name for name in REQUIRED_CONFIG_FIELDS if name not in config]
        if missing:
            raise ValueError(f"Plugin configuration {config_path} is missing: {', '.join(missing)}")

        self._configs[config_path] = config
        logger.debug(f"Loaded plugin configuration {config_path}")
        return config


def create_default_plugin_manager() -> PluginManager:
    """Create a manager with the bundled language plugins registered."""
    import plugins.typescript as typescript_plugin

    manager = PluginManager()
    config = manager.load_plugin_config(Path(typescript_plugin.__file__).parent)
    manager.register_plugin(typescript_plugin.TypeScriptPlugin(config=config))
    return manager
