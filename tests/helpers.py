"""Test helpers: a fake bw CLI and vault item builders."""

from __future__ import annotations

import json
import subprocess
from typing import Any


SESSION = "test-session-token"


class FakeBw:
    """Stand-in for ``subprocess.run`` that answers like the bw CLI."""

    def __init__(self) -> None:
        self.logged_in = True
        self.unlock_token = SESSION
        self.items: dict[str, dict[str, Any] | str] = {}
        self.broken: set[str] = set()
        self.calls: list[list[str]] = []

    def add(self, item: dict[str, Any]) -> None:
        self.items[item["id"]] = item

    def _done(
        self, cmd: list[str], stdout: str = "", stderr: str = "", code: int = 0
    ) -> subprocess.CompletedProcess[str]:
        return subprocess.CompletedProcess(cmd, code, stdout=stdout, stderr=stderr)

    def __call__(self, cmd: list[str], **kwargs: Any) -> subprocess.CompletedProcess[str]:
        self.calls.append(list(cmd))
        args = cmd[1:]

        if args[:2] == ["login", "--check"]:
            if self.logged_in:
                return self._done(cmd, stdout="You are logged in!")
            return self._done(cmd, stderr="You are not logged in.", code=1)

        if args[:2] == ["unlock", "--raw"]:
            return self._done(cmd, stdout=self.unlock_token)

        session = args[args.index("--session") + 1] if "--session" in args else None
        if session != SESSION:
            return self._done(cmd, stderr="Vault is locked.", code=1)

        if args[:2] == ["list", "items"]:
            listing = [{"id": item_id} for item_id in self.items]
            return self._done(cmd, stdout=json.dumps(listing))

        if args[:2] == ["get", "item"]:
            item_id = args[2]
            if item_id in self.broken or item_id not in self.items:
                return self._done(cmd, stderr="Not found.", code=1)
            item = self.items[item_id]
            return self._done(
                cmd, stdout=item if isinstance(item, str) else json.dumps(item)
            )

        return self._done(cmd, stderr=f"Unknown command: {args}", code=1)


def make_item(
    item_id: str,
    name: str,
    password: str | None = None,
    notes: str | None = None,
    fields: list[tuple[str, str]] | None = None,
    uris: list[str] | None = None,
) -> dict[str, Any]:
    """Build a vault item document shaped like ``bw get item`` output."""
    return {
        "object": "item",
        "id": item_id,
        "type": 1,
        "name": name,
        "notes": notes,
        "login": {
            "username": None,
            "password": password,
            "uris": [{"match": None, "uri": uri} for uri in (uris or [])],
        },
        "fields": [
            {"name": fname, "value": fvalue, "type": 1}
            for fname, fvalue in (fields or [])
        ],
    }
