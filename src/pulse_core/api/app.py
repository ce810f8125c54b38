"""FastAPI application exposing the live opportunity feed, trades and mastery."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import Any

import structlog
from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from pydantic import AwareDatetime, BaseModel

from pulse_core.detection import DETECTOR_REGISTRY
from pulse_core.feed import SnapshotFeed
from pulse_core.models import TradeOutcome
from pulse_core.opportunities import OpportunityRecord
from pulse_core.pipeline import PipelineCoordinator

logger = structlog.get_logger()


class SettleRequest(BaseModel):
    pnl: float
    return_pct: float
    settled_at: AwareDatetime | None = None


def _record_payload(record: OpportunityRecord) -> dict[str, Any]:
    return {
        **record.opportunity.model_dump(mode="json"),
        "viewed": record.viewed,
        "executed": record.executed,
        "executed_at": record.executed_at.isoformat() if record.executed_at else None,
        "interpretation": (
            record.interpretation.model_dump(mode="json") if record.interpretation else None
        ),
    }


def create_app(
    coordinator: PipelineCoordinator,
    feed: SnapshotFeed | None = None,
) -> FastAPI:
    """Build the API around *coordinator*; if *feed* is given it is consumed in the background."""

    @contextlib.asynccontextmanager
    async def lifespan(_app: FastAPI):
        task = None
        if feed is not None:
            task = asyncio.create_task(coordinator.run(feed))
            logger.info("Pipeline task started")
        try:
            yield
        finally:
            if task is not None:
                task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await task

    app = FastAPI(
        title="Options Pulse API",
        description="Live options opportunities, executions and mastery score",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/api/health")
    async def health_check():
        return {"status": "healthy", "timestamp": datetime.now(timezone.utc).isoformat()}

    @app.get("/api/detectors")
    async def list_detectors():
        enabled = {d.name for d in coordinator.detectors}
        return {
            "detectors": [
                {
                    "name": name,
                    "condition": cls.condition.value,
                    "enabled": name in enabled,
                    "docs": cls.docs,
                }
                for name, cls in DETECTOR_REGISTRY.items()
            ]
        }

    @app.get("/api/opportunities")
    async def list_opportunities():
        """Urgency-ranked live set."""
        records = []
        for opp in coordinator.live():
            record = coordinator.registry.record(opp.id)
            if record is not None:
                records.append(_record_payload(record))
        return {"opportunities": records}

    @app.get("/api/opportunities/history")
    async def opportunity_history():
        return {
            "history": [
                {
                    **a.opportunity.model_dump(mode="json"),
                    "reason": a.reason,
                    "archived_at": a.archived_at.isoformat(),
                }
                for a in coordinator.registry.history()
            ]
        }

    @app.get("/api/opportunities/{opportunity_id}")
    async def get_opportunity(opportunity_id: str):
        record = coordinator.registry.record(opportunity_id)
        if record is None:
            raise HTTPException(status_code=404, detail="Opportunity not found")
        return _record_payload(record)

    @app.post("/api/opportunities/{opportunity_id}/view")
    async def view_opportunity(opportunity_id: str):
        return {"applied": coordinator.view(opportunity_id)}

    @app.post("/api/opportunities/{opportunity_id}/execute")
    async def execute_opportunity(opportunity_id: str):
        trade = coordinator.execute(opportunity_id)
        if trade is None:
            return {"applied": False, "trade": None}
        return {
            "applied": True,
            "trade": trade.model_dump(mode="json"),
            "execution_speed": trade.execution_speed,
        }

    @app.get("/api/trades")
    async def list_trades():
        return {"trades": [t.model_dump(mode="json") for t in coordinator.ledger.snapshot()]}

    @app.post("/api/trades/{trade_id}/settle")
    async def settle_trade(trade_id: str, req: SettleRequest):
        outcome = TradeOutcome(
            settled_at=req.settled_at or datetime.now(timezone.utc),
            pnl=req.pnl,
            return_pct=req.return_pct,
        )
        verdict = coordinator.settle(trade_id, outcome)
        if verdict.reason == "conflicting_outcome":
            raise HTTPException(status_code=409, detail="Trade already settled with a different outcome")
        return {"accepted": verdict.accepted, "reason": verdict.reason}

    @app.get("/api/mastery")
    async def get_mastery():
        return coordinator.mastery().model_dump(mode="json")

    return app
