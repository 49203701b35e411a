"""
Prometheus metrics for sync runs

Usage:
    from utils.metrics import MetricsPublisher, SyncMetrics

    metrics = SyncMetrics()
    ...
    MetricsPublisher(metrics.registry, pushgateway="localhost:9091").publish()
"""

from .publisher import MetricsPublisher
from .sync import SyncMetrics

__all__ = [
    "MetricsPublisher",
    "SyncMetrics",
]
