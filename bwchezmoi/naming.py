"""Domain extraction and template name generation."""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from enum import Enum
from typing import Final

from bwchezmoi.exceptions import NameCollisionError

logger = logging.getLogger(__name__)

_SCHEME_RE: Final[re.Pattern[str]] = re.compile(r"^https?://")

# Checked in order; only the first matching suffix is removed
DOMAIN_SUFFIXES: Final[tuple[str, ...]] = (".com", ".org", ".net", ".io", ".ai", ".co")

# (keyword, name suffix), first keyword found in the item name wins
NAME_SUFFIXES: Final[tuple[tuple[str, str], ...]] = (
    ("api", "ApiKey"),
    ("token", "ApiToken"),
    ("key", "ApiKey"),
)
DEFAULT_NAME_SUFFIX: Final[str] = "ApiKey"

_UNSAFE_FILE_CHARS_RE: Final[re.Pattern[str]] = re.compile(r"[^a-z0-9_.-]")
_NON_WORD_RE: Final[re.Pattern[str]] = re.compile(r"\W", re.ASCII)


def extract_domain(url: str | None) -> str:
    """Derive a host name from a stored URL.

    Strips an http(s) scheme, keeps everything up to the next ``/`` and
    drops a leading ``www.``. Malformed input is not rejected.

    Args:
        url: URL as stored in the vault

    Returns:
        Best-effort host name, possibly empty
    """
    if not url:
        return ""
    host = _SCHEME_RE.sub("", url, count=1).split("/", 1)[0]
    return host.removeprefix("www.")


def _strip_domain_suffix(domain: str) -> str:
    for suffix in DOMAIN_SUFFIXES:
        if domain.endswith(suffix):
            return domain[: -len(suffix)]
    return domain


def generate_name(item_name: str, domain: str | None) -> str:
    """Generate a template name for a vault item.

    Examples:
        >>> generate_name("OpenAI API Key", "openai.com")
        'OpenaiApiKey'
        >>> generate_name("My Secret Note", "")
        'My_Secret_Note'

    Args:
        item_name: Display name of the vault item
        domain: Host name from the item's first URI, or empty

    Returns:
        Generated name (same inputs always give the same name)
    """
    if not domain:
        return item_name.replace(" ", "_").replace("(", "").replace(")", "")

    base = _strip_domain_suffix(domain.lower().removeprefix("www."))
    base = base[:1].upper() + base[1:]

    lowered = item_name.lower()
    suffix = next(
        (name for keyword, name in NAME_SUFFIXES if keyword in lowered),
        DEFAULT_NAME_SUFFIX,
    )
    return f"{base}{suffix}"


def file_stem(name: str) -> str:
    """Turn a generated name into a file name stem.

    The stem is lowercased and holds only ``a-z0-9_.-``, without leading
    dots, so it can never name a path outside the output directory.

        >>> file_stem("../../escaped_key")
        '_.._escaped_key'
    """
    stem = _UNSAFE_FILE_CHARS_RE.sub("_", name.lower()).lstrip(".")
    return stem or "_"


def template_variable(name: str) -> str:
    """Turn a generated name into a template variable name (without ``$``)."""
    variable = _NON_WORD_RE.sub("_", name.lower())
    if not variable or variable[0].isdigit():
        variable = f"_{variable}"
    return variable


class CollisionPolicy(str, Enum):
    """What to do when two items generate the same name."""

    SUFFIX = "suffix"
    SKIP = "skip"
    OVERWRITE = "overwrite"
    ABORT = "abort"


@dataclass(frozen=True)
class NameClaim:
    """Result of reserving a generated name."""

    requested: str
    granted: str | None
    conflict: bool = False
    holder: str | None = None


class NameRegistry:
    """Track generated names within a single run.

    Names are compared by their file stem (see :func:`file_stem`), since
    that is what ends up as the output file name.
    """

    def __init__(self, policy: CollisionPolicy = CollisionPolicy.SUFFIX) -> None:
        self.policy = policy
        self._owners: dict[str, str] = {}

    def __contains__(self, name: str) -> bool:
        return file_stem(name) in self._owners

    def claim(self, name: str, owner: str) -> NameClaim:
        """Reserve a name for an item.

        Args:
            name: Generated name
            owner: Display name of the item claiming it

        Returns:
            NameClaim describing what was granted

        Raises:
            NameCollisionError: If the name is taken and the policy is abort
        """
        key = file_stem(name)
        holder = self._owners.get(key)
        if holder is None:
            self._owners[key] = owner
            return NameClaim(requested=name, granted=name)

        logger.warning(f"Name collision on '{name}': '{holder}' and '{owner}'")

        if self.policy is CollisionPolicy.ABORT:
            raise NameCollisionError(name, holder, owner)
        if self.policy is CollisionPolicy.SKIP:
            return NameClaim(requested=name, granted=None, conflict=True, holder=holder)
        if self.policy is CollisionPolicy.OVERWRITE:
            self._owners[key] = owner
            return NameClaim(requested=name, granted=name, conflict=True, holder=holder)

        counter = 2
        while file_stem(f"{name}_{counter}") in self._owners:
            counter += 1
        granted = f"{name}_{counter}"
        self._owners[file_stem(granted)] = owner
        return NameClaim(requested=name, granted=granted, conflict=True, holder=holder)
