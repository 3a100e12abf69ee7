"""Structured logging for the Lambda handlers

Every record is written to stdout as a single JSON line, which CloudWatch
Logs Insights can query field by field:

    {"timestamp": "2025-10-15T12:00:00.000Z", "level": "INFO",
     "logger": "shortlinks.lambdas.redirect_url.app",
     "message": "Redirecting client to destination URL. Responding with 302.",
     "slug": "abc123", "event": "REDIRECT_SUCCESS"}

Anything passed through `extra=` becomes a top-level field. Each Lambda
package calls `initialize_logging()` from its `__init__.py`, so the handler
module's loggers are configured before they emit anything.
"""

import os
import json
import logging
import logging.config
from datetime import datetime, UTC

from shortlinks.constants import ENV


# Attributes every LogRecord carries; whatever else is on a record came from `extra=`
_RECORD_ATTRS = frozenset(vars(logging.makeLogRecord({}))) | {'message', 'asctime', 'taskName'}

# Chatty third-party loggers capped at WARNING regardless of LOG_LEVEL
_QUIET_LOGGERS = ('boto3', 'botocore', 'urllib3')


class JsonFormatter(logging.Formatter):
    def formatTime(self, record: logging.LogRecord, datefmt: str | None = None) -> str:
        moment = datetime.fromtimestamp(record.created, tz=UTC)
        return moment.isoformat(timespec='milliseconds').replace('+00:00', 'Z')

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            'timestamp': self.formatTime(record),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
        }
        entry.update((key, value) for key, value in vars(record).items() if key not in _RECORD_ATTRS)

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        if record.stack_info:
            entry['stack'] = self.formatStack(record.stack_info)

        return json.dumps(entry, default=str)


def initialize_logging(level: str | None = None) -> None:
    """Route the root logger to stdout through JsonFormatter.

    `level` defaults to the LOG_LEVEL environment variable, then INFO.
    """
    level = (level or os.getenv(ENV.App.LOG_LEVEL) or 'INFO').upper()
    logging.config.dictConfig(
        {
            'version': 1,
            'disable_existing_loggers': False,
            'formatters': {'json': {'()': JsonFormatter}},
            'handlers': {
                'stdout': {
                    'class': 'logging.StreamHandler',
                    'formatter': 'json',
                    'stream': 'ext://sys.stdout',
                }
            },
            'loggers': {name: {'level': 'WARNING'} for name in _QUIET_LOGGERS},
            'root': {'level': level, 'handlers': ['stdout']},
        }
    )
