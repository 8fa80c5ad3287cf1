"""
Base interface for language plugins.

A language plugin turns file content into the ``SourceFile`` representation
the comment coverage engine consumes: a node arena, the ordered comments and
the ordered code tokens of the file.
"""

from abc import ABC, abstractmethod
from typing import List

from commentguard.models.syntax import SourceFile


class LanguagePlugin(ABC):
    """Base interface for language-specific parsing plugins."""

    @property
    @abstractmethod
    def language_name(self) -> str:
        """Return the language name (e.g., 'typescript')."""
        pass

    @property
    @abstractmethod
    def file_extensions(self) -> List[str]:
        """Return supported file extensions (e.g., ['.ts', '.tsx'])."""
        pass

    @abstractmethod
    def parse_source(self, file_path: str, content: str) -> SourceFile:
        """
        Parse file content into the engine's source representation.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SourceFile with nodes, comments and tokens

        Raises:
            ValueError: If the file cannot be parsed
        """
        pass

    async def parse_file(self, file_path: str, content: str) -> SourceFile:
        """
        Parse file content; async entry point used by the analyzer service.

        Args:
            file_path: Path to the file being parsed
            content: File content as string

        Returns:
            SourceFile with nodes, comments and tokens
        """
        return self.parse_source(file_path, content)
