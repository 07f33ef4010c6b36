"""bwchezmoi - Bitwarden API keys as chezmoi templates.

bwchezmoi scans a Bitwarden vault through the ``bw`` CLI and:
- Spots values that look like API keys (password, notes, custom fields)
- Derives a stable template name from the item's URL and display name
- Writes chezmoi templates that look the secret up at apply time
"""

from __future__ import annotations

from bwchezmoi.exceptions import (
    AuthenticationMissingError,
    BwChezmoiError,
    ConfigError,
    FetchFailureError,
    FormatError,
    NameCollisionError,
    VaultCommandError,
)
from bwchezmoi.matcher import is_likely_key, name_suggests_secret
from bwchezmoi.models import (
    ClassificationResult,
    FieldRef,
    ScanStatus,
    SourceField,
    VaultItem,
)
from bwchezmoi.naming import (
    CollisionPolicy,
    NameRegistry,
    extract_domain,
    generate_name,
)
from bwchezmoi.scanner import scan_item
from bwchezmoi.templates import emit_master_config, emit_template

__version__ = "0.1.0"

__all__ = [
    # Core functions
    "is_likely_key",
    "name_suggests_secret",
    "scan_item",
    "extract_domain",
    "generate_name",
    "emit_template",
    "emit_master_config",
    # Types
    "VaultItem",
    "ClassificationResult",
    "FieldRef",
    "ScanStatus",
    "SourceField",
    "CollisionPolicy",
    "NameRegistry",
    # Exceptions
    "BwChezmoiError",
    "AuthenticationMissingError",
    "VaultCommandError",
    "FetchFailureError",
    "NameCollisionError",
    "ConfigError",
    "FormatError",
]
