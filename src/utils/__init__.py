"""
Shared utilities for the sync tool

Provides:
- vault_client: HashiCorp Vault integration for the store connection string
- metrics: Prometheus metrics for sync runs
- tracing: OpenTelemetry spans
- logging: Structured logging setup
"""

__version__ = "1.0.0"
__all__ = ["vault_client", "metrics", "tracing", "logging"]
