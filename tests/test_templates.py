"""Tests for template rendering and snippet formats."""

import tomllib

import pytest
import yaml

from bwchezmoi.exceptions import FormatError
from bwchezmoi.formats import EnvFormat, TOMLFormat, YAMLFormat, get_format
from bwchezmoi.formats.env_format import env_var_name
from bwchezmoi.models import FieldRef, SourceField
from bwchezmoi.templates import (
    binding,
    emit_config_template,
    emit_master_config,
    emit_template,
    template_file_name,
)


def test_emit_template_toml():
    """Test the default template layout."""
    text = emit_template(
        "OpenAI API Key", "OpenaiApiKey", FieldRef(kind=SourceField.PASSWORD)
    )
    assert text == (
        "# Template for OpenAI API Key\n"
        "# This file can be used in your Chezmoi setup\n"
        "\n"
        "{{/* Define API key for OpenAI API Key using Bitwarden */}}\n"
        '{{- $openaiapikey := (bitwarden "OpenAI API Key" "password") -}}\n'
        "\n"
        "# Example usage in a config file:\n"
        "[OpenaiApiKey]\n"
        'key = "{{ $openaiapikey }}"\n'
    )


def test_emit_template_custom_field():
    """Test a custom field is looked up by its name."""
    text = emit_template(
        "Stripe", "Stripe", FieldRef(kind=SourceField.FIELD, name="secret key")
    )
    assert '(bitwarden "Stripe" "secret key")' in text


def test_emit_template_accepts_plain_field_name():
    text = emit_template("Stripe", "Stripe", "notes")
    assert '(bitwarden "Stripe" "notes")' in text


def test_binding_escapes_quotes():
    """Test item names with quotes stay valid template strings."""
    line = binding('My "special" key', "My_special_key", "password")
    assert line == (
        '{{- $my_special_key := (bitwarden "My \\"special\\" key" "password") -}}'
    )


def test_emit_template_yaml():
    text = emit_template("GitHub Token", "GithubApiToken", "password", "yaml")
    usage = text.split("# Example usage in a config file:\n", 1)[1]
    assert yaml.safe_load(usage) == {"GithubApiToken": {"key": "{{ $githubapitoken }}"}}


def test_emit_template_env():
    text = emit_template("GitHub Token", "GithubApiToken", "password", "env")
    assert text.endswith('export GITHUB_API_TOKEN="{{ $githubapitoken }}"\n')


def test_emit_template_unknown_format():
    with pytest.raises(FormatError):
        emit_template("X", "X", "password", "xml")


def test_template_file_name():
    assert template_file_name("OpenaiApiKey") == "openaiapikey.tmpl"


def test_template_file_name_stays_in_directory():
    """Test path separators and leading dots never reach the file name."""
    assert template_file_name("AWS_key_prod/staging") == "aws_key_prod_staging.tmpl"
    assert template_file_name("../../escaped_key") == "_.._escaped_key.tmpl"


def test_emit_template_subdomain_variable():
    """Test a generated name with dots still yields a usable variable."""
    text = emit_template("Service token", "Api.serviceApiToken", "password")
    assert '{{- $api_serviceapitoken := (bitwarden "Service token" "password") -}}' in text
    usage = text.split("# Example usage in a config file:\n", 1)[1]
    assert tomllib.loads(usage) == {
        "Api.serviceApiToken": {"key": "{{ $api_serviceapitoken }}"}
    }


def test_emit_template_odd_item_name():
    """Test comment and header lines survive awkward item names."""
    name = "weird */ {{ name }}\nsecond line"
    text = emit_template(name, "weird_name", "password")
    lines = text.splitlines()

    assert lines[0] == "# Template for weird * / { { name }} second line"
    assert lines[3] == (
        "{{/* Define API key for weird * / { { name }} second line using Bitwarden */}}"
    )
    assert '(bitwarden "weird */ {{ name }}\\nsecond line" "password")' in lines[4]


def test_master_config_globs_output_dir():
    """Test the master template includes every generated file."""
    text = emit_master_config("chezmoi-templates-generated/")
    assert (
        '{{- range $path, $bytes := (includeFiles "chezmoi-templates-generated/*.tmpl") }}'
        in text
    )
    assert "{{ $bytes }}" in text
    assert "{{- end }}" in text


def test_config_template_binds_every_entry():
    text = emit_config_template(
        "Example",
        [
            ("OpenAI API Key", "OpenaiApiKey", "password"),
            ("Anthropic API Key", "AnthropicApiKey", "password"),
        ],
    )
    lines = text.splitlines()
    assert lines[0] == "# Example"
    assert lines[1].startswith("{{- $openaiapikey := ")
    assert lines[2].startswith("{{- $anthropicapikey := ")
    assert "[OpenaiApiKey]" in text
    assert "[AnthropicApiKey]" in text


class TestFormats:
    """Test snippet format handlers."""

    def test_registry(self):
        assert isinstance(get_format("toml"), TOMLFormat)
        assert isinstance(get_format("yaml"), YAMLFormat)
        assert isinstance(get_format("env"), EnvFormat)

    def test_unknown_format(self):
        with pytest.raises(FormatError, match="Unsupported format"):
            get_format("ini")

    def test_names(self):
        assert TOMLFormat.get_name() == "toml"
        assert YAMLFormat.get_name() == "yaml"
        assert EnvFormat.get_name() == "env"

    def test_toml_is_valid(self):
        snippet = TOMLFormat().render_usage("OpenaiApiKey", "openaiapikey")
        assert tomllib.loads(snippet) == {
            "OpenaiApiKey": {"key": "{{ $openaiapikey }}"}
        }

    def test_toml_quotes_odd_section_names(self):
        snippet = TOMLFormat().render_usage("Api.serviceApiKey", "api_serviceapikey")
        assert "Api.serviceApiKey" in tomllib.loads(snippet)

    @pytest.mark.parametrize(
        "section,expected",
        [
            ("OpenaiApiKey", "OPENAI_API_KEY"),
            ("My_Secret_Note", "MY_SECRET_NOTE"),
            ("Api.serviceApiToken", "API_SERVICE_API_TOKEN"),
        ],
    )
    def test_env_var_name(self, section, expected):
        assert env_var_name(section) == expected
