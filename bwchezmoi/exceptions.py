"""Exceptions for bwchezmoi."""

from __future__ import annotations


class BwChezmoiError(Exception):
    """Base exception for all bwchezmoi errors."""


class AuthenticationMissingError(BwChezmoiError):
    """Raised when no valid Bitwarden login or session is available."""


class VaultCommandError(BwChezmoiError):
    """Raised when a bw command fails or cannot be run."""


class FetchFailureError(VaultCommandError):
    """Raised when a single vault item cannot be fetched or parsed."""

    def __init__(self, item_id: str, message: str) -> None:
        super().__init__(f"Failed to fetch item '{item_id}': {message}")
        self.item_id = item_id


class NameCollisionError(BwChezmoiError):
    """Raised when two items generate the same template name."""

    def __init__(self, name: str, first_item: str, second_item: str) -> None:
        super().__init__(
            f"Generated name '{name}' is used by both '{first_item}' "
            f"and '{second_item}'"
        )
        self.name = name
        self.first_item = first_item
        self.second_item = second_item


class ConfigError(BwChezmoiError):
    """Raised when the settings file is unreadable or invalid."""


class FormatError(BwChezmoiError):
    """Raised when a snippet format is unknown or fails to render."""
