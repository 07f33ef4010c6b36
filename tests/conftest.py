"""Shared fixtures for bwchezmoi tests."""

from __future__ import annotations

import functools

import pytest
from click.testing import CliRunner

from bwchezmoi.vault import BitwardenClient
from tests.helpers import SESSION, FakeBw


@pytest.fixture
def temp_dir(tmp_path):
    """Provide a temporary directory."""
    return tmp_path


@pytest.fixture
def cli_runner():
    """Provide a Click CLI test runner."""
    return CliRunner()


@pytest.fixture
def fake_bw():
    """Provide a fake bw CLI with an empty vault."""
    return FakeBw()


@pytest.fixture
def client(fake_bw):
    """Provide a vault client bound to the fake bw CLI."""
    return BitwardenClient(session=SESSION, runner=fake_bw)


@pytest.fixture
def patched_cli(monkeypatch, fake_bw, temp_dir):
    """Route CLI vault calls to the fake bw and isolate the config dir."""
    monkeypatch.setattr(
        "bwchezmoi.cli.BitwardenClient",
        functools.partial(BitwardenClient, runner=fake_bw),
    )
    monkeypatch.setenv("BWCHEZMOI_CONFIG_DIR", str(temp_dir / "config"))
    monkeypatch.delenv("BW_SESSION", raising=False)
    return fake_bw
