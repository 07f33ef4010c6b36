"""Snippet formats for generated templates."""

from __future__ import annotations

from bwchezmoi.exceptions import FormatError
from bwchezmoi.formats.base import SnippetFormat
from bwchezmoi.formats.env_format import EnvFormat
from bwchezmoi.formats.toml_format import TOMLFormat
from bwchezmoi.formats.yaml_format import YAMLFormat

# Registry of available formats
FORMAT_REGISTRY: dict[str, type[SnippetFormat]] = {
    "toml": TOMLFormat,
    "yaml": YAMLFormat,
    "env": EnvFormat,
}


def get_format(name: str) -> SnippetFormat:
    """Get a snippet format handler by name.

    Raises:
        FormatError: If the format is not supported
    """
    if name not in FORMAT_REGISTRY:
        raise FormatError(
            f"Unsupported format: {name}. "
            f"Supported formats: {', '.join(FORMAT_REGISTRY.keys())}"
        )
    return FORMAT_REGISTRY[name]()


__all__ = [
    "FORMAT_REGISTRY",
    "EnvFormat",
    "SnippetFormat",
    "TOMLFormat",
    "YAMLFormat",
    "get_format",
]
