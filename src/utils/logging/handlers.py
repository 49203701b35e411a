"""
Context-carrying logger.
"""

import logging
from typing import Any


class ContextLogger(logging.LoggerAdapter):
    """
    Logger that attaches fixed context to every record.

    Keyword arguments passed to a log call are merged into the context for
    that record only:

        logger = ContextLogger(__name__, collection="locations")
        logger.info("Batch executed", upserted=12)
    """

    _LOG_KWARGS = ("exc_info", "stack_info", "stacklevel", "extra")

    def __init__(self, name: str, **context: Any):
        super().__init__(logging.getLogger(name), dict(context))

    def process(self, msg: Any, kwargs: dict[str, Any]) -> tuple[Any, dict[str, Any]]:
        log_kwargs = {key: kwargs.pop(key) for key in self._LOG_KWARGS if key in kwargs}
        extra = {**self.extra, **log_kwargs.pop("extra", {}), **kwargs}
        return msg, {**log_kwargs, "extra": extra}
