import json
import logging
from datetime import UTC, datetime


class StructuredLogger:
    """Writes one JSON object per event through the ``portfolio.events``
    logger, so events share the handlers set up by configure_logging.
    """

    def __init__(self, name: str = "portfolio.events"):
        self._logger = logging.getLogger(name)

    def build_payload(self, event: str, **fields) -> dict:
        """Flatten event fields; a dict passed as ``extra`` is merged in place."""
        payload = {"timestamp": datetime.now(UTC).isoformat(), "event": event}
        extra = fields.pop("extra", None)
        payload.update(fields)
        if isinstance(extra, dict):
            payload.update(extra)
        elif extra is not None:
            payload["extra"] = extra
        return payload

    def log_event(self, event: str, level: int = logging.INFO, **fields) -> None:
        """Emit ``event``, e.g.

        events.log_event("manifest_failed", level=logging.ERROR, error="timeout")
        """
        if not self._logger.isEnabledFor(level):
            return
        payload = self.build_payload(event, **fields)
        self._logger.log(level, json.dumps(payload, default=str))


events = StructuredLogger()

__all__ = ["events", "StructuredLogger"]
