"""
Logging setup for the dashboard and batch runs.

Records are written as JSON lines unless the output is an interactive
terminal. Ranking context passed through ``extra=`` (job, candidate,
batch size, skip count) is carried into the JSON payload.
"""
import json
import logging
import sys
from datetime import datetime, timezone
from typing import Any, Dict, Optional, TextIO

CONTEXT_FIELDS = ('job_id', 'candidate_id', 'batch_size', 'skipped')
TEXT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


class JSONFormatter(logging.Formatter):
    """One JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        payload: Dict[str, Any] = {
            'timestamp': datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'location': f"{record.module}.{record.funcName}:{record.lineno}",
        }
        payload.update(
            (name, getattr(record, name)) for name in CONTEXT_FIELDS if hasattr(record, name)
        )

        if record.exc_info:
            payload['exception'] = self.formatException(record.exc_info)

        return json.dumps(payload, default=str)


def setup_logging(level: int = logging.INFO, stream: Optional[TextIO] = None) -> logging.Logger:
    """
    Route all logging to a single console handler on the root logger.

    Args:
        level: Logging level for the root logger and handler
        stream: Output stream; stdout when omitted

    Returns:
        The root logger
    """
    stream = stream or sys.stdout
    root = logging.getLogger()
    root.setLevel(level)

    for existing in list(root.handlers):
        root.removeHandler(existing)

    handler = logging.StreamHandler(stream)
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(TEXT_FORMAT) if stream.isatty() else JSONFormatter())
    root.addHandler(handler)

    return root
