"""
Language plugin architecture.

This package provides the plugin system that parses source files into the
representation consumed by the comment coverage engine.
"""

from plugins.base import LanguagePlugin
from plugins.manager import PluginManager, create_default_plugin_manager

__all__ = ['LanguagePlugin', 'PluginManager', 'create_default_plugin_manager']
