"""Trade ledger."""

from pulse_core.trades.ledger import SettlementVerdict, TradeLedger

__all__ = ["SettlementVerdict", "TradeLedger"]
