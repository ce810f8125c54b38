"""Pipeline coordinator — wires feed, detectors, registry, ledger and scoring."""

from pulse_core.pipeline.coordinator import PipelineCoordinator, instantiate_detectors

__all__ = ["PipelineCoordinator", "instantiate_detectors"]
