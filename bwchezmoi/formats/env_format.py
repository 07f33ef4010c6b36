"""Shell environment snippet format."""

from __future__ import annotations

import re

from bwchezmoi.formats.base import SnippetFormat, template_reference

_CAMEL_BOUNDARY = re.compile(r"(?<=[a-z0-9])(?=[A-Z])")
_NON_IDENT = re.compile(r"[^A-Za-z0-9_]+")


def env_var_name(section: str) -> str:
    """Turn a generated name into an environment variable name.

    Examples:
        >>> env_var_name("OpenaiApiKey")
        'OPENAI_API_KEY'
    """
    name = _CAMEL_BOUNDARY.sub("_", section)
    name = _NON_IDENT.sub("_", name).strip("_")
    return name.upper()


class EnvFormat(SnippetFormat):
    """Usage block as a shell ``export`` line."""

    def render_usage(self, section: str, variable: str) -> str:
        return f'export {env_var_name(section)}="{template_reference(variable)}"\n'

    @classmethod
    def get_name(cls) -> str:
        return "env"
