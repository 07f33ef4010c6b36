"""Classify vault items by the first slot holding a key-like value."""

from __future__ import annotations

import logging
from collections.abc import Iterator

from bwchezmoi.matcher import is_likely_key, name_suggests_secret
from bwchezmoi.models import (
    ClassificationResult,
    FieldRef,
    ScanStatus,
    SourceField,
    VaultItem,
)
from bwchezmoi.naming import extract_domain

logger = logging.getLogger(__name__)


def candidate_fields(item: VaultItem) -> Iterator[tuple[FieldRef, str | None]]:
    """Yield the slots of an item in scan priority order.

    Order is login password, notes, then custom fields as stored.
    """
    yield FieldRef(kind=SourceField.PASSWORD), item.password
    yield FieldRef(kind=SourceField.NOTES), item.notes
    for custom in item.fields:
        yield FieldRef(kind=SourceField.FIELD, name=custom.name), custom.value


def scan_item(item: VaultItem) -> ClassificationResult:
    """Classify a single vault item.

    The first slot whose value looks like a key wins; later matches are
    ignored. If nothing matches but the item name hints at a secret, the
    result is marked as suspected.

    Args:
        item: Vault item to classify

    Returns:
        Classification result for the item
    """
    uri = item.first_uri
    domain = extract_domain(uri) if uri else ""

    match = next(
        ((ref, value) for ref, value in candidate_fields(item) if is_likely_key(value)),
        None,
    )

    if match is not None:
        ref, value = match
        logger.debug(f"Item '{item.name}' matched in {ref.describe()}")
        return ClassificationResult(
            status=ScanStatus.MATCHED,
            item_id=item.id,
            item_name=item.name,
            field=ref,
            value=value,
            domain=domain,
        )

    status = (
        ScanStatus.SUSPECTED if name_suggests_secret(item.name) else ScanStatus.NO_MATCH
    )
    logger.debug(f"Item '{item.name}' classified as {status.value}")
    return ClassificationResult(
        status=status,
        item_id=item.id,
        item_name=item.name,
        domain=domain,
    )
