"""JSON log formatting for mediaforge records."""

from __future__ import annotations

import json
import logging
from datetime import datetime, timezone
from typing import Any


def _record_attributes() -> frozenset[str]:
    blank = logging.LogRecord("", logging.INFO, "", 0, "", (), None)
    return frozenset(vars(blank)) | {"message", "asctime", "taskName"}


# Set on every record by BatchItemFilter
_BATCH_ATTRS = frozenset({"item_index", "item_input", "item_tag"})


class JSONFormatter(logging.Formatter):
    """Format each record as one JSON object.

    Keys: ``timestamp`` (UTC, ISO-8601), ``level``, ``logger``, ``message``;
    ``item`` (``index`` and ``input``) inside a batch run; ``context`` with
    the attributes passed through ``extra=``; ``exception`` when a traceback
    is attached.
    """

    _reserved: frozenset[str] = _record_attributes() | _BATCH_ATTRS

    def format(self, record: logging.LogRecord) -> str:
        created = datetime.fromtimestamp(record.created, tz=timezone.utc)
        entry: dict[str, Any] = {
            "timestamp": created.isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }

        index = getattr(record, "item_index", None)
        if index is not None:
            entry["item"] = {
                "index": index,
                "input": getattr(record, "item_input", None),
            }

        context = {
            key: value
            for key, value in vars(record).items()
            if key not in self._reserved and not key.startswith("_")
        }
        if context:
            entry["context"] = context

        if record.exc_info:
            entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(entry, default=str)
