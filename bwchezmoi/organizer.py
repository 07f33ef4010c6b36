"""Scan a whole vault and write templates for the classified items."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path

from bwchezmoi.config import Settings
from bwchezmoi.exceptions import FetchFailureError
from bwchezmoi.models import ClassificationResult
from bwchezmoi.naming import NameRegistry, generate_name
from bwchezmoi.scanner import scan_item
from bwchezmoi.templates import (
    MASTER_TEMPLATE_NAME,
    emit_master_config,
    emit_template,
    template_file_name,
)
from bwchezmoi.vault import BitwardenClient

logger = logging.getLogger(__name__)


@dataclass
class WrittenTemplate:
    item_name: str
    name: str
    path: Path
    renamed_from: str | None = None


@dataclass
class ScanReport:
    """Results of scanning every item in the vault."""

    results: list[ClassificationResult] = field(default_factory=list)
    failures: list[FetchFailureError] = field(default_factory=list)

    @property
    def matched(self) -> list[ClassificationResult]:
        return [r for r in self.results if r.matched]

    @property
    def suspected(self) -> list[ClassificationResult]:
        return [r for r in self.results if r.suspected]


@dataclass
class OrganizeReport(ScanReport):
    """Scan results plus the files written for them."""

    written: list[WrittenTemplate] = field(default_factory=list)
    skipped_collisions: list[ClassificationResult] = field(default_factory=list)
    master_path: Path | None = None


class Organizer:
    """Classify vault items one at a time and emit templates."""

    def __init__(self, client: BitwardenClient, settings: Settings | None = None):
        self.client = client
        self.settings = settings or Settings()

    def iter_results(
        self, failures: list[FetchFailureError] | None = None
    ) -> Iterator[ClassificationResult]:
        """Yield a classification for each item in vault order.

        Items that cannot be fetched are logged, appended to ``failures``
        when given, and skipped.
        """
        for item_id in self.client.list_item_ids():
            try:
                item = self.client.get_item(item_id)
            except FetchFailureError as e:
                logger.warning(str(e))
                if failures is not None:
                    failures.append(e)
                continue
            yield scan_item(item)

    def scan(self) -> ScanReport:
        """Classify all vault items without writing anything."""
        report = ScanReport()
        report.results.extend(self.iter_results(report.failures))
        return report

    def organize(self, output_dir: Path | None = None) -> OrganizeReport:
        """Write one template per matched item plus the master template.

        Args:
            output_dir: Target directory, defaults to the configured one

        Returns:
            Report of what was written and skipped

        Raises:
            NameCollisionError: On a name collision when the policy is abort
        """
        output_dir = Path(output_dir or self.settings.output_dir)
        registry = NameRegistry(self.settings.collision_policy)
        report = OrganizeReport()

        output_dir.mkdir(parents=True, exist_ok=True)

        for result in self.iter_results(report.failures):
            report.results.append(result)
            if not result.matched or result.field is None:
                continue

            claim = registry.claim(
                generate_name(result.item_name, result.domain), result.item_name
            )
            if claim.granted is None:
                logger.warning(
                    f"Skipping '{result.item_name}': name '{claim.requested}' "
                    f"already used by '{claim.holder}'"
                )
                report.skipped_collisions.append(result)
                continue

            path = output_dir / template_file_name(claim.granted)
            path.write_text(
                emit_template(
                    result.item_name,
                    claim.granted,
                    result.field,
                    self.settings.usage_format,
                ),
                encoding="utf-8",
            )
            logger.info(f"Wrote {path} for '{result.item_name}'")
            report.written.append(
                WrittenTemplate(
                    item_name=result.item_name,
                    name=claim.granted,
                    path=path,
                    renamed_from=(
                        claim.requested if claim.granted != claim.requested else None
                    ),
                )
            )

        report.master_path = output_dir / MASTER_TEMPLATE_NAME
        report.master_path.write_text(
            emit_master_config(output_dir.as_posix()), encoding="utf-8"
        )
        return report
