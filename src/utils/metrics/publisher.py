"""
Metrics publishing for batch runs.

A one-shot job exits before Prometheus could scrape it, so the registry is
either pushed to a Pushgateway or written to a node-exporter textfile.
"""

import logging
from typing import Optional

from prometheus_client import CollectorRegistry, push_to_gateway, write_to_textfile

logger = logging.getLogger(__name__)


class MetricsPublisher:
    """Publishes one registry at the end of a run."""

    def __init__(
        self,
        registry: CollectorRegistry,
        job_name: str = "csv_sync",
        pushgateway: Optional[str] = None,
        textfile: Optional[str] = None,
    ):
        """
        Initialize metrics publisher

        Args:
            registry: Registry holding the run's metrics
            job_name: Pushgateway job label
            pushgateway: Pushgateway address (host:port), None disables pushing
            textfile: Path for the textfile collector, None disables writing
        """
        self.registry = registry
        self.job_name = job_name
        self.pushgateway = pushgateway
        self.textfile = textfile

    @property
    def enabled(self) -> bool:
        return bool(self.pushgateway or self.textfile)

    def publish(self) -> None:
        """
        Push and/or write the registry.

        Publishing failures are logged, they never fail the sync itself.
        """
        if self.pushgateway:
            try:
                push_to_gateway(self.pushgateway, job=self.job_name, registry=self.registry)
                logger.info(f"Pushed metrics to {self.pushgateway}")
            except OSError as e:
                logger.error(f"Failed to push metrics to {self.pushgateway}: {e}")

        if self.textfile:
            try:
                write_to_textfile(self.textfile, self.registry)
                logger.info(f"Wrote metrics to {self.textfile}")
            except OSError as e:
                logger.error(f"Failed to write metrics to {self.textfile}: {e}")
