"""Stock Adjustment Engine.

Turns an order's lines into signed deltas and applies them to the ledger
as one batch.  Names that have no ledger entry are reported in the summary,
they never fail the batch.  A storage failure is raised as
``StockAdjustmentFailed`` so the order workflow can isolate it.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Iterable, List

import structlog
from django.db import DatabaseError, transaction

from modules.inventory.constants import AdjustmentDirection, AppliedResult
from modules.inventory.dtos import AdjustmentSummary, StockDelta, StockLineDTO
from modules.inventory.exceptions import StockAdjustmentFailed

if TYPE_CHECKING:
    from modules.inventory.services import StockService

logger = structlog.get_logger(__name__)


def to_deltas(
    lines: Iterable[StockLineDTO], direction: AdjustmentDirection
) -> List[StockDelta]:
    sign = -1 if direction is AdjustmentDirection.DEDUCT else 1
    return [
        StockDelta(product_name=line.product_name, quantity=sign * line.quantity)
        for line in lines
    ]


class StockAdjustmentEngine:
    def __init__(self, stock_service: StockService) -> None:
        self._stock = stock_service

    def deduct(self, lines: Iterable[StockLineDTO]) -> AdjustmentSummary:
        return self.apply(lines, AdjustmentDirection.DEDUCT)

    def refund(self, lines: Iterable[StockLineDTO]) -> AdjustmentSummary:
        return self.apply(lines, AdjustmentDirection.REFUND)

    def apply(
        self, lines: Iterable[StockLineDTO], direction: AdjustmentDirection
    ) -> AdjustmentSummary:
        """Apply every line in ``direction``; all rows change or none do.

        Raises:
            StockAdjustmentFailed: the database rejected the batch.
        """
        deltas = to_deltas(lines, direction)
        log = logger.bind(direction=direction.value, line_count=len(deltas))

        matched = modified = 0
        unmatched: List[str] = []
        try:
            with transaction.atomic():
                for delta in deltas:
                    result = self._stock.apply_delta(delta.product_name, delta.quantity)
                    if result is AppliedResult.NOT_MATCHED:
                        unmatched.append(delta.product_name)
                        continue
                    matched += 1
                    if result is AppliedResult.APPLIED:
                        modified += 1
        except DatabaseError as exc:
            log.error("stock.adjustment_failed", error=str(exc))
            raise StockAdjustmentFailed(
                f"Could not {direction.value} stock for {len(deltas)} line(s)."
            ) from exc

        summary = AdjustmentSummary(
            matched_count=matched,
            modified_count=modified,
            unmatched=tuple(unmatched),
        )
        if unmatched:
            log.warning("stock.adjustment_unmatched", unmatched=list(unmatched))
        log.info(
            "stock.adjusted",
            matched_count=summary.matched_count,
            modified_count=summary.modified_count,
        )
        return summary
