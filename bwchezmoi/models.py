"""Data models for vault items and scan results."""

from __future__ import annotations

from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class CustomField(BaseModel):
    """A user-defined name/value pair attached to a vault item."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    name: str = ""
    value: str | None = None

    @field_validator("name", mode="before")
    @classmethod
    def none_name_as_empty(cls, v: Any) -> Any:
        return "" if v is None else v


class LoginUri(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")

    uri: str | None = None


class LoginData(BaseModel):
    """Login section of a vault item."""

    model_config = ConfigDict(frozen=True, extra="ignore")

    username: str | None = None
    password: str | None = None
    uris: list[LoginUri] = []

    @field_validator("uris", mode="before")
    @classmethod
    def none_uris_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v


class VaultItem(BaseModel):
    """A vault item as returned by ``bw get item``.

    Only the keys this tool reads are modelled; everything else in the
    JSON document is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: str
    name: str
    notes: str | None = None
    login: LoginData | None = None
    fields: list[CustomField] = []

    @field_validator("fields", mode="before")
    @classmethod
    def none_fields_as_empty(cls, v: Any) -> Any:
        return [] if v is None else v

    @property
    def password(self) -> str | None:
        return self.login.password if self.login else None

    @property
    def first_uri(self) -> str | None:
        """Return the first stored URI, if any."""
        if self.login is None or not self.login.uris:
            return None
        return self.login.uris[0].uri


class SourceField(str, Enum):
    """Slot of a vault item that held the matched value."""

    PASSWORD = "password"
    NOTES = "notes"
    FIELD = "field"


class ScanStatus(str, Enum):
    MATCHED = "matched"
    SUSPECTED = "suspected"
    NO_MATCH = "no_match"


class FieldRef(BaseModel):
    """Reference to a single slot of a vault item."""

    model_config = ConfigDict(frozen=True)

    kind: SourceField
    name: str | None = None

    @property
    def lookup_name(self) -> str:
        """Field argument used in the ``bitwarden`` template lookup."""
        if self.kind is SourceField.FIELD:
            return self.name or ""
        return self.kind.value

    def describe(self) -> str:
        if self.kind is SourceField.FIELD:
            return f"field: {self.name}"
        return self.kind.value


class ClassificationResult(BaseModel):
    """Outcome of scanning one vault item."""

    model_config = ConfigDict(frozen=True)

    status: ScanStatus
    item_id: str
    item_name: str
    field: FieldRef | None = None
    value: str | None = None
    domain: str = ""

    @property
    def matched(self) -> bool:
        return self.status is ScanStatus.MATCHED

    @property
    def suspected(self) -> bool:
        return self.status is ScanStatus.SUSPECTED

    def preview(self, length: int = 20) -> str:
        """Return a truncated view of the matched value."""
        if not self.value:
            return ""
        return f"{self.value[:length]}..."
