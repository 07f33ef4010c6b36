"""TOML snippet format."""

from __future__ import annotations

import tomli_w

from bwchezmoi.exceptions import FormatError
from bwchezmoi.formats.base import SnippetFormat, template_reference


class TOMLFormat(SnippetFormat):
    """Usage block as a TOML table with a ``key`` entry."""

    def render_usage(self, section: str, variable: str) -> str:
        """Render a TOML table.

        Args:
            section: Table name
            variable: Template variable holding the secret

        Returns:
            TOML string

        Raises:
            FormatError: If serialization fails
        """
        try:
            return tomli_w.dumps({section: {"key": template_reference(variable)}})
        except Exception as e:
            raise FormatError(f"Failed to render TOML snippet: {e}") from e

    @classmethod
    def get_name(cls) -> str:
        return "toml"
