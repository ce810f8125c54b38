"""Opportunity lifecycle — registry, records, archive."""

from pulse_core.opportunities.registry import (
    ArchivedOpportunity,
    OpportunityRecord,
    OpportunityRegistry,
    TickResult,
)

__all__ = ["ArchivedOpportunity", "OpportunityRecord", "OpportunityRegistry", "TickResult"]
