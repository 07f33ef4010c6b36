"""Render chezmoi templates that look secrets up in Bitwarden."""

from __future__ import annotations

from collections.abc import Iterable

from bwchezmoi.formats import get_format
from bwchezmoi.models import FieldRef
from bwchezmoi.naming import file_stem, template_variable

MASTER_TEMPLATE_NAME = "master-config.tmpl"
TEMPLATE_SUFFIX = ".tmpl"


def _quote(value: str) -> str:
    escaped = (
        value.replace("\\", "\\\\")
        .replace('"', '\\"')
        .replace("\n", "\\n")
        .replace("\r", "\\r")
    )
    return f'"{escaped}"'


def _comment_text(value: str) -> str:
    # Flattened to one line with "{{" and "*/" broken up
    text = " ".join(value.splitlines())
    return text.replace("{{", "{ {").replace("*/", "* /")


def _field_name(field: FieldRef | str) -> str:
    return field.lookup_name if isinstance(field, FieldRef) else field


def template_file_name(generated_name: str) -> str:
    """File name of the template written for a generated name."""
    return f"{file_stem(generated_name)}{TEMPLATE_SUFFIX}"


def binding(item_name: str, generated_name: str, field: FieldRef | str) -> str:
    """Render the variable binding that fetches a field from Bitwarden.

    Args:
        item_name: Vault item name used for the lookup
        generated_name: Generated name the variable is derived from
        field: Field holding the secret

    Returns:
        A single template line without trailing newline
    """
    variable = template_variable(generated_name)
    return (
        f"{{{{- ${variable} := (bitwarden {_quote(item_name)} "
        f"{_quote(_field_name(field))}) -}}}}"
    )


def emit_template(
    item_name: str,
    generated_name: str,
    field: FieldRef | str,
    usage_format: str = "toml",
) -> str:
    """Render the template for a single classified item.

    The result holds a comment header naming the item, the variable
    binding, and an example usage block keyed by the generated name.

    Args:
        item_name: Vault item name
        generated_name: Generated name for the item
        field: Field holding the secret
        usage_format: Snippet format for the example block

    Returns:
        Template text

    Raises:
        FormatError: If the usage format is unknown
    """
    usage = get_format(usage_format).render_usage(
        generated_name, template_variable(generated_name)
    )
    label = _comment_text(item_name)
    return (
        f"# Template for {label}\n"
        "# This file can be used in your Chezmoi setup\n"
        "\n"
        f"{{{{/* Define API key for {label} using Bitwarden */}}}}\n"
        f"{binding(item_name, generated_name, field)}\n"
        "\n"
        "# Example usage in a config file:\n"
        f"{usage}"
    )


def emit_master_config(template_dir: str) -> str:
    """Render the aggregate template that includes every generated file.

    Args:
        template_dir: Directory of the generated templates, as seen by chezmoi

    Returns:
        Template text
    """
    pattern = f"{template_dir.rstrip('/')}/*{TEMPLATE_SUFFIX}"
    return (
        "# Master configuration template with all API keys\n"
        "\n"
        "{{/* Include all individual API keys */}}\n"
        "\n"
        "# Generated section - API Keys\n"
        f"{{{{- range $path, $bytes := (includeFiles {_quote(pattern)}) }}}}\n"
        "{{ $path }}:\n"
        "{{ $bytes }}\n"
        "{{- end }}\n"
        "\n"
        "# Individual API keys can be used in specific contexts\n"
        "# Example:\n"
        "# [services]\n"
        '# openai_api_key = "{{ .OpenaiApiKey }}"\n'
        '# anthropic_api_key = "{{ .AnthropicApiKey }}"\n'
    )


def emit_config_template(
    title: str,
    entries: Iterable[tuple[str, str, FieldRef | str]],
    usage_format: str = "toml",
) -> str:
    """Render a config template binding several vault items at once.

    Args:
        title: Comment line placed at the top
        entries: (item name, generated name, field) triples
        usage_format: Snippet format for the config body

    Returns:
        Template text
    """
    handler = get_format(usage_format)
    entries = list(entries)
    lines = [f"# {_comment_text(title)}"]
    lines.extend(binding(item, name, field) for item, name, field in entries)
    body = "".join(
        handler.render_usage(name, template_variable(name)) for _, name, _ in entries
    )
    return "\n".join(lines) + "\n\n" + body
