"""YAML snippet format."""

from __future__ import annotations

import yaml

from bwchezmoi.exceptions import FormatError
from bwchezmoi.formats.base import SnippetFormat, template_reference


class YAMLFormat(SnippetFormat):
    """Usage block as a YAML mapping."""

    def render_usage(self, section: str, variable: str) -> str:
        try:
            return yaml.safe_dump(
                {section: {"key": template_reference(variable)}},
                default_flow_style=False,
                sort_keys=False,
            )
        except yaml.YAMLError as e:
            raise FormatError(f"Failed to render YAML snippet: {e}") from e

    @classmethod
    def get_name(cls) -> str:
        return "yaml"
