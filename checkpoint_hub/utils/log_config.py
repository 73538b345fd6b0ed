from __future__ import annotations

import logging

from checkpoint_hub.utils.request_context import request_id_var, subject_id_var

_LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s [rid=%(request_id)s sub=%(subject_id)s] %(message)s"


class RequestContextFilter(logging.Filter):
    """Stamp every record with the current request id and subject (or '-')."""

    def filter(self, record: logging.LogRecord) -> bool:
        record.request_id = request_id_var.get() or "-"
        record.subject_id = subject_id_var.get() or "-"
        return True


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    for handler in root.handlers:
        if getattr(handler, "_checkpoint_hub", False):
            root.setLevel(level.upper())
            return

    handler = logging.StreamHandler()
    handler._checkpoint_hub = True  # type: ignore[attr-defined]
    handler.addFilter(RequestContextFilter())
    handler.setFormatter(logging.Formatter(_LOG_FORMAT))
    root.addHandler(handler)
    root.setLevel(level.upper())
