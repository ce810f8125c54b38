"""Trade ledger — executed trades and their out-of-order settlement."""

from __future__ import annotations

import threading
from dataclasses import dataclass

import structlog

from pulse_core.errors import SettlementConflictError
from pulse_core.models import Trade, TradeOutcome

log = structlog.get_logger("ledger")


@dataclass
class SettlementVerdict:
    """Result of a settlement attempt, with a reason when rejected."""

    accepted: bool
    reason: str = ""
    trade: Trade | None = None


class TradeLedger:
    """Lock-protected, append-only list of trades.

    Outcomes are attached at most once; a repeated identical settlement is
    accepted silently, a differing one raises SettlementConflictError.
    """

    def __init__(self, trades: list[Trade] | None = None) -> None:
        self._trades: dict[str, Trade] = {}
        self._lock = threading.Lock()
        for trade in trades or []:
            self._trades[trade.id] = trade

    def record(self, trade: Trade) -> None:
        with self._lock:
            if trade.id in self._trades:
                raise ValueError(f"Duplicate trade id: {trade.id!r}")
            self._trades[trade.id] = trade

    def settle(self, trade_id: str, outcome: TradeOutcome) -> tuple[Trade, bool] | None:
        """Attach *outcome* to a trade.

        Returns ``(trade, changed)``, where ``changed`` is False for an
        identical repeat, or None for an unknown id. The check and the write
        happen under one lock, so only one of two racing callers sees True.
        """
        with self._lock:
            trade = self._trades.get(trade_id)
            if trade is None:
                return None
            if trade.outcome is not None:
                if trade.outcome == outcome:
                    return trade, False
                raise SettlementConflictError(trade_id)
            if outcome.settled_at < trade.executed_at:
                raise ValueError(
                    f"trade {trade_id!r} cannot settle before it was executed"
                )
            settled = trade.model_copy(update={"outcome": outcome})
            self._trades[trade_id] = settled
        log.info("trade_settled", trade_id=trade_id, pnl=outcome.pnl)
        return settled, True

    def get(self, trade_id: str) -> Trade | None:
        with self._lock:
            return self._trades.get(trade_id)

    def for_opportunity(self, opportunity_id: str) -> Trade | None:
        with self._lock:
            for trade in self._trades.values():
                if trade.opportunity_id == opportunity_id:
                    return trade
        return None

    def snapshot(self) -> tuple[Trade, ...]:
        """Consistent copy of the trade list, in recording order."""
        with self._lock:
            return tuple(self._trades.values())

    def __len__(self) -> int:
        with self._lock:
            return len(self._trades)
