"""Import all table modules so Base.metadata knows about them."""

from pulse_core.db.tables.trades import OpportunityHistoryRow, TradeRow

__all__ = ["OpportunityHistoryRow", "TradeRow"]
