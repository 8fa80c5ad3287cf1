"""
TypeScript language plugin.

Parses TypeScript, TSX and JavaScript sources with tree-sitter.
"""

from plugins.typescript.plugin import TypeScriptPlugin

__all__ = ['TypeScriptPlugin']
