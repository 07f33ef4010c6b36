"""Base class for example-usage snippet formats."""

from __future__ import annotations

from abc import ABC, abstractmethod


def template_reference(variable: str) -> str:
    """Return the template expression that prints a bound variable."""
    return f"{{{{ ${variable} }}}}"


class SnippetFormat(ABC):
    """Renders the example usage block of a generated template."""

    @abstractmethod
    def render_usage(self, section: str, variable: str) -> str:
        """Render an example config block using a template variable.

        Args:
            section: Config section or key name (the generated name)
            variable: Template variable holding the secret

        Returns:
            Snippet text ending with a newline

        Raises:
            FormatError: If rendering fails
        """

    @classmethod
    @abstractmethod
    def get_name(cls) -> str:
        """Get format name."""
