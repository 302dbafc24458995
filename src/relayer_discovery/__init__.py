"""Relayer pool health discovery service."""

__version__ = "0.1.0"
__description__ = (
    "Probes the relayer pool and publishes the shared set of healthy relayers"
)
