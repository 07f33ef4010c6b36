"""Thin wrapper around the Bitwarden CLI (``bw``).

Every call that needs an unlocked vault receives the session token held
by the client instance. The token is passed on the command line with
``--session`` and is never read from the process environment here.
"""

from __future__ import annotations

import json
import logging
import subprocess
from collections.abc import Callable, Sequence
from typing import Any, Final

from pydantic import ValidationError

from bwchezmoi.exceptions import (
    AuthenticationMissingError,
    FetchFailureError,
    VaultCommandError,
)
from bwchezmoi.models import VaultItem

logger = logging.getLogger(__name__)

Runner = Callable[..., "subprocess.CompletedProcess[str]"]

DEFAULT_COMMAND: Final[str] = "bw"
DEFAULT_TIMEOUT: Final[float] = 60.0

# bw stderr fragments that mean the session is missing or stale
_AUTH_HINTS: Final[tuple[str, ...]] = (
    "not logged in",
    "vault is locked",
    "session key is invalid",
)


def _redact(args: Sequence[str]) -> list[str]:
    """Hide the session token when logging a command line."""
    redacted = list(args)
    for i, arg in enumerate(redacted[:-1]):
        if arg == "--session":
            redacted[i + 1] = "***"
    return redacted


class BitwardenClient:
    """Run ``bw`` commands and decode their JSON output."""

    def __init__(
        self,
        session: str | None = None,
        command: str = DEFAULT_COMMAND,
        timeout: float = DEFAULT_TIMEOUT,
        runner: Runner = subprocess.run,
    ) -> None:
        """Initialize the client.

        Args:
            session: Session token from ``bw unlock --raw``
            command: Name or path of the bw executable
            timeout: Timeout in seconds for non-interactive calls
            runner: Callable with the signature of ``subprocess.run``
        """
        self.session = session
        self.command = command
        self.timeout = timeout
        self._runner = runner

    def with_session(self, session: str) -> BitwardenClient:
        """Return a copy of this client bound to another session."""
        return BitwardenClient(
            session=session,
            command=self.command,
            timeout=self.timeout,
            runner=self._runner,
        )

    def _run(self, args: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        cmd = [self.command, *args]
        logger.debug(f"Running: {' '.join(_redact(cmd))}")
        try:
            return self._runner(cmd, text=True, **kwargs)
        except FileNotFoundError as e:
            raise VaultCommandError(
                f"Bitwarden CLI '{self.command}' not found. "
                "Install it from https://bitwarden.com/help/cli/"
            ) from e
        except subprocess.TimeoutExpired as e:
            raise VaultCommandError(
                f"'{self.command} {args[0]}' timed out after {self.timeout}s"
            ) from e

    def _run_with_session(self, args: list[str]) -> subprocess.CompletedProcess[str]:
        if not self.session:
            raise AuthenticationMissingError(
                "No Bitwarden session. Run 'bw unlock --raw' and pass the "
                "token with --session or BW_SESSION."
            )
        result = self._run(
            [*args, "--session", self.session],
            capture_output=True,
            timeout=self.timeout,
        )
        if result.returncode != 0:
            stderr = (result.stderr or "").strip()
            logger.debug(f"bw {args[0]} exited {result.returncode}: {stderr}")
            if any(hint in stderr.lower() for hint in _AUTH_HINTS):
                raise AuthenticationMissingError(
                    f"Bitwarden session is not valid: {stderr}"
                )
        return result

    def check_login(self) -> None:
        """Make sure the CLI is logged in.

        Raises:
            AuthenticationMissingError: If ``bw login --check`` fails
        """
        result = self._run(
            ["login", "--check"], capture_output=True, timeout=self.timeout
        )
        if result.returncode != 0:
            raise AuthenticationMissingError(
                "You are not logged in to Bitwarden. Please run 'bw login' first."
            )

    def unlock(self) -> str:
        """Unlock the vault interactively and return the session token.

        The master password prompt is left attached to the terminal; only
        stdout is captured.

        Raises:
            AuthenticationMissingError: If no token was produced
        """
        result = self._run(["unlock", "--raw"], stdout=subprocess.PIPE)
        token = (result.stdout or "").strip()
        if result.returncode != 0 or not token:
            raise AuthenticationMissingError(
                "Could not unlock Bitwarden vault. "
                "Please ensure you are properly logged in."
            )
        return token

    def list_item_ids(self) -> list[str]:
        """List the ids of all vault items in the order bw returns them.

        Raises:
            AuthenticationMissingError: If the session is missing or invalid
            VaultCommandError: If the listing fails
        """
        result = self._run_with_session(["list", "items"])
        if result.returncode != 0:
            raise VaultCommandError(
                "Could not retrieve Bitwarden items. "
                "Make sure you are logged in and the session is valid."
            )
        try:
            data = json.loads(result.stdout)
        except json.JSONDecodeError as e:
            raise VaultCommandError(f"Invalid JSON from 'bw list items': {e}") from e
        if not isinstance(data, list):
            raise VaultCommandError("Unexpected output from 'bw list items'")

        return [
            entry["id"] for entry in data if isinstance(entry, dict) and entry.get("id")
        ]

    def get_item(self, item_id: str) -> VaultItem:
        """Fetch a single vault item.

        Args:
            item_id: Vault item id

        Returns:
            Parsed vault item

        Raises:
            AuthenticationMissingError: If the session is missing or invalid
            FetchFailureError: If the item cannot be fetched or parsed
        """
        result = self._run_with_session(["get", "item", item_id])
        if result.returncode != 0:
            message = (result.stderr or "").strip() or f"exit code {result.returncode}"
            raise FetchFailureError(item_id, message)
        try:
            return VaultItem.model_validate_json(result.stdout)
        except ValidationError as e:
            raise FetchFailureError(item_id, f"unexpected item format: {e}") from e
