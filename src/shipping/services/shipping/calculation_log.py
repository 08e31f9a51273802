"""Fire-and-forget persistence of computed quotes for analytics."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Any, Callable, Optional

from ...models.domain import ShippingCalculationResult
from .errors import LoggingFailure

logger = logging.getLogger(__name__)

CalculationSink = Callable[[dict[str, Any]], Optional[bool]]


def calculation_row(result: ShippingCalculationResult, order_id: Optional[int] = None) -> dict[str, Any]:
    """Row layout of the ``shipping_calculations`` table."""

    return {
        "order_id": order_id,
        "branch_id": result.branch.id,
        "customer_latitude": result.customer_latitude,
        "customer_longitude": result.customer_longitude,
        "calculated_distance_km": result.effective_distance_km,
        "zone_id": result.zone.zone_id,
        "base_cost": result.fee.base_cost,
        "distance_cost": result.fee.distance_cost,
        "total_shipping_cost": result.fee.total_cost,
        "order_amount": result.fee.order_amount,
        "free_shipping_applied": result.fee.free_shipping_applied,
        "calculation_method": result.calculation_method,
    }


class CalculationLogger:
    """Hands calculation rows to a sink on a background thread pool.

    ``record`` never raises and never waits for the sink. The returned future
    resolves to ``True`` when the row was stored and ``False`` otherwise. A sink
    that returns ``False`` skipped the row without failing.
    """

    def __init__(
        self,
        sink: CalculationSink,
        executor: ThreadPoolExecutor | None = None,
        *,
        enabled: bool = True,
        max_workers: int = 2,
    ) -> None:
        self._sink = sink
        self._executor = executor or ThreadPoolExecutor(
            max_workers=max_workers, thread_name_prefix="shipping-calc-log"
        )
        self.enabled = enabled

    def _report(self, failure: LoggingFailure, row: dict[str, Any]) -> None:
        logger.error(
            "Failed to log shipping calculation: %s",
            failure,
            exc_info=failure.__cause__ or failure,
            extra={
                "error_code": failure.code,
                "order_id": row.get("order_id"),
                "branch_id": row.get("branch_id"),
                "zone_id": row.get("zone_id"),
            },
        )

    def _write(self, row: dict[str, Any]) -> bool:
        try:
            stored = self._sink(row)
        except Exception as exc:
            failure = LoggingFailure(str(exc) or type(exc).__name__)
            failure.__cause__ = exc
            self._report(failure, row)
            return False
        return stored is not False

    def record(self, result: ShippingCalculationResult, order_id: Optional[int] = None) -> Optional[Future]:
        if not self.enabled:
            return None
        try:
            row = calculation_row(result, order_id)
            return self._executor.submit(self._write, row)
        except Exception as exc:
            failure = LoggingFailure(f"could not schedule calculation log: {exc}")
            failure.__cause__ = exc
            self._report(failure, {"order_id": order_id})
            return None

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
