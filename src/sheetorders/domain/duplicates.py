"""Classify a sheet row as a new order or a duplicate of a persisted one."""

from __future__ import annotations

import logging
from datetime import timedelta
from typing import TYPE_CHECKING

from sheetorders.config.ingest import IngestSettings
from sheetorders.domain.dates import parse_order_date, utcnow
from sheetorders.domain.model import DuplicateClassification, DuplicateStage, DuplicateVerdict
from sheetorders.domain.normalization import canonical_phone
from sheetorders.domain.ports import ExactMatchCriteria
from sheetorders.domain.similarity import SimilarityScorer, row_total

if TYPE_CHECKING:
    from collections.abc import Iterable
    from datetime import date
    from uuid import UUID

    from sheetorders.domain.dates import Clock
    from sheetorders.domain.model import RawOrderRow
    from sheetorders.domain.ports import OrderSnapshot, OrderUnitOfWork

log = logging.getLogger(__name__)

NEW_ORDER = DuplicateVerdict(classification=DuplicateClassification.NEW)


def _percent(similarity: float) -> int:
    return round(similarity * 100)


class DuplicateDetector:
    """Run the linked, exact, same-day and extended-window checks in order.

    The first check that matches decides the verdict. Candidates are compared in
    the order the store returns them and ties keep the earlier candidate, so a
    fixed store state always yields the same verdict.
    """

    def __init__(
        self,
        settings: IngestSettings | None = None,
        *,
        scorer: SimilarityScorer | None = None,
        clock: Clock = utcnow,
    ) -> None:
        self.settings = settings or IngestSettings()
        self.scorer = scorer or SimilarityScorer()
        self._clock = clock

    def detect(
        self,
        uow: OrderUnitOfWork,
        row: RawOrderRow,
        *,
        organization_id: UUID,
        product_id: UUID,
        force_resync: bool = False,
    ) -> DuplicateVerdict:
        if row.order_id and not force_resync:
            verdict = DuplicateVerdict(
                classification=DuplicateClassification.SKIP,
                stage=DuplicateStage.LINKED,
                reason=f"Row already linked to order {row.order_id}",
            )
            log.debug("Row %s already linked to order %s", row.row_number, row.order_id)
            return verdict

        order_date = parse_order_date(row.date) or self._clock().date()
        orders = uow.repositories.orders

        phone = canonical_phone(row.phone)
        if phone is not None:
            criteria = ExactMatchCriteria(
                organization_id=organization_id,
                order_date=order_date,
                customer_phone=phone,
                product_id=product_id,
                shipping_address=row.address.strip(),
                total=row_total(row),
            )
            exact = orders.find_exact_duplicate(criteria)
            if exact is not None:
                verdict = DuplicateVerdict(
                    classification=DuplicateClassification.SKIP,
                    stage=DuplicateStage.EXACT,
                    matched_order_id=exact.id,
                    matched_order_number=exact.order_number,
                    similarity=1.0,
                    reason=f"Exact duplicate found: Order {exact.order_number}",
                )
                self._log_detection(verdict, row, organization_id)
                return verdict

        same_day = orders.find_on_date(organization_id, order_date)
        verdict = self._flag_best(row, same_day, DuplicateStage.SAME_DAY)
        if verdict is None and self.settings.extended_window_days > 0:
            window = timedelta(days=self.settings.extended_window_days)
            nearby = orders.find_in_range(
                organization_id,
                order_date - window,
                order_date + window,
                exclude=order_date,
            )
            verdict = self._flag_best(row, nearby, DuplicateStage.EXTENDED_WINDOW)

        if verdict is None:
            log.debug("No duplicate found for row %s", row.row_number)
            return NEW_ORDER
        self._log_detection(verdict, row, organization_id)
        return verdict

    def _flag_best(
        self, row: RawOrderRow, candidates: Iterable[OrderSnapshot], stage: DuplicateStage
    ) -> DuplicateVerdict | None:
        best: OrderSnapshot | None = None
        best_score = 0.0
        for candidate in candidates:
            score = self.scorer.score(row, candidate)
            if best is None or score > best_score:
                best, best_score = candidate, score

        if best is None or best_score <= self.settings.flag_threshold:
            return None

        conflicts = self.scorer.identify_conflicting_fields(row, best)
        return DuplicateVerdict(
            classification=DuplicateClassification.FLAG,
            stage=stage,
            matched_order_id=best.id,
            matched_order_number=best.order_number,
            similarity=best_score,
            conflicting_fields=conflicts,
            reason=(
                f"Potential duplicate found: Order {best.order_number} "
                f"({_percent(best_score)}% match)"
            ),
            notes=self.duplicate_notes(row, best, best_score, conflicts, stage),
        )

    def duplicate_notes(
        self,
        row: RawOrderRow,
        existing: OrderSnapshot,
        similarity: float,
        conflicts: tuple[str, ...],
        stage: DuplicateStage,
    ) -> str:
        lines = [
            f"Potential duplicate of Order {existing.order_number} "
            f"({_percent(similarity)}% similarity).",
            f"Existing order: {existing.customer_full_name} - {existing.customer_phone or ''}"
            f" - {_format_day(existing.order_date)}",
            f"Sheet order: {row.customer_name} - {row.phone} - {row.date}",
        ]
        if conflicts:
            lines.append(f"Conflicting fields: {', '.join(conflicts)}")
        lines.append(f"Detection type: {stage}")
        lines.append(f"Detected at: {self._clock().isoformat()}")
        return "\n".join(lines)

    @staticmethod
    def _log_detection(verdict: DuplicateVerdict, row: RawOrderRow, organization_id: UUID) -> None:
        log.warning(
            "Duplicate order detected (organization=%s, row=%s, stage=%s, classification=%s, "
            "existing_order=%s, similarity=%s, conflicting_fields=%s, customer=%r, phone=%r)",
            organization_id,
            row.row_number,
            verdict.stage,
            verdict.classification,
            verdict.matched_order_number,
            verdict.similarity,
            ",".join(verdict.conflicting_fields),
            row.customer_name,
            row.phone,
        )


def _format_day(value: date) -> str:
    return value.strftime("%a %b %d %Y")


__all__ = ["NEW_ORDER", "DuplicateDetector"]
