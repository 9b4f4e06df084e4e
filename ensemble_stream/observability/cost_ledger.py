"""
Cost ledger adapter.

Turns vendor usage payloads into ``UsageRecord`` objects and appends them to
the ledger sink. The ledger itself is owned by the application; by default
an in-memory ledger is used.
"""

from typing import Any, Dict, Iterable, Optional

from ..core.normalization.usage import estimate_usage_record, to_usage_record
from ..models.usage import UsageRecord
from .logging import StreamLogger
from .sinks.base import CostLedger
from .sinks.in_memory import InMemoryCostLedger


class CostLedgerAdapter:
    """Maps usage payloads for one provider and forwards them to a ledger."""

    def __init__(self, provider: str, ledger: Optional[CostLedger] = None):
        self.provider = provider
        self.ledger = ledger if ledger is not None else get_cost_ledger()
        self._log = StreamLogger(provider)

    def record_usage(
        self,
        usage_data: Optional[Dict[str, Any]],
        model: str,
        image_count: int = 0,
        request_id: Optional[str] = None,
    ) -> Optional[UsageRecord]:
        """Append a record for ``usage_data``; nothing is recorded for empty payloads."""
        record = to_usage_record(usage_data, self.provider, model, image_count=image_count)
        if record is None:
            return None
        self.ledger.add_usage(record)
        self._log.log_usage(record, request_id=request_id)
        return record

    def record_estimate(self, texts: Iterable[str], model: str,
                        request_id: Optional[str] = None) -> UsageRecord:
        """Append a character-based estimate for calls that report no usage field."""
        record = estimate_usage_record(texts, self.provider, model)
        self.ledger.add_usage(record)
        self._log.log_usage(record, request_id=request_id)
        return record


_ledger: Optional[CostLedger] = None


def get_cost_ledger() -> CostLedger:
    """Process-wide ledger used when none is passed explicitly."""
    global _ledger
    if _ledger is None:
        _ledger = InMemoryCostLedger()
    return _ledger


def set_cost_ledger(ledger: Optional[CostLedger]) -> None:
    global _ledger
    _ledger = ledger
