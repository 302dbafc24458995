"""Relayer health discovery: probing, scheduling and status aggregation."""

from .freshness import FreshnessTracker
from .prober import RelayerHealthProber
from .relayers import relayer_base_url, relayer_health_url, relayer_ids
from .scheduler import HealthProbeScheduler
from .status import StatusAggregator, classify_pool

__all__ = [
    "FreshnessTracker",
    "HealthProbeScheduler",
    "RelayerHealthProber",
    "StatusAggregator",
    "classify_pool",
    "relayer_base_url",
    "relayer_health_url",
    "relayer_ids",
]
