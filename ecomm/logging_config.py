"""
Logging configuration
Structured (JSON) or plain console output, optional rotating log file

Data-access code logs with ``extra={'event_type': ..., <fields>}``; the
structured formatter turns that payload into the ``event`` / ``data`` keys
of each JSON line.
"""

import json
import logging
import logging.config
from datetime import datetime, timezone
from typing import Any, Dict, Optional

# Attributes every LogRecord carries; anything else came in through ``extra=``
_RESERVED_ATTRS = frozenset(
    vars(logging.LogRecord('', 0, '', 0, '', (), None))
) | {'message', 'asctime'}


def event_fields(record: logging.LogRecord) -> Dict[str, Any]:
    """The ``extra=`` payload attached to a record"""
    return {
        key: value for key, value in vars(record).items()
        if key not in _RESERVED_ATTRS
    }


def record_to_dict(record: logging.LogRecord, service_name: str) -> Dict[str, Any]:
    fields = event_fields(record)
    entry = {
        'ts': datetime.fromtimestamp(record.created, timezone.utc).isoformat(),
        'level': record.levelname,
        'service': service_name,
        'logger': record.name,
        'event': fields.pop('event_type', None),
        'message': record.getMessage(),
        'source': f'{record.module}.{record.funcName}:{record.lineno}',
    }
    if fields:
        entry['data'] = fields
    if record.exc_info and record.exc_info[0] is not None:
        entry['error'] = {
            'type': record.exc_info[0].__name__,
            'detail': str(record.exc_info[1]),
            'traceback': logging.Formatter().formatException(record.exc_info),
        }
    return entry


class StructuredFormatter(logging.Formatter):
    """One JSON object per record"""

    def __init__(self, service_name: str = "ecomm"):
        super().__init__()
        self.service_name = service_name

    def format(self, record: logging.LogRecord) -> str:
        return json.dumps(record_to_dict(record, self.service_name), ensure_ascii=False, default=str)


def build_logging_config(
    log_level: str = "INFO",
    log_format: str = "simple",
    log_file: Optional[str] = None,
    service_name: str = "ecomm"
) -> Dict[str, Any]:
    """
    Build a ``logging.config.dictConfig`` dictionary

    Args:
        log_level (str): logging level name
        log_format (str): ``structured`` or ``simple``
        log_file (Optional[str]): path of an optional rotating log file
        service_name (str): service name for structured records

    Returns:
        Dict[str, Any]: the logging configuration
    """
    level = log_level.upper()
    if log_format not in ('structured', 'simple'):
        log_format = 'simple'

    formatters = {
        'structured': {
            '()': StructuredFormatter,
            'service_name': service_name
        },
        'simple': {
            'format': '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            'datefmt': '%Y-%m-%d %H:%M:%S'
        }
    }

    handlers = {
        'console': {
            'class': 'logging.StreamHandler',
            'level': level,
            'formatter': log_format,
            'stream': 'ext://sys.stdout'
        }
    }

    if log_file:
        handlers['file'] = {
            'class': 'logging.handlers.RotatingFileHandler',
            'level': level,
            'formatter': log_format,
            'filename': log_file,
            'maxBytes': 10485760,  # 10MB
            'backupCount': 5,
            'encoding': 'utf-8'
        }

    handler_names = list(handlers.keys())
    loggers = {
        '': {
            'level': level,
            'handlers': handler_names,
        },
        'ecomm': {
            'level': level,
            'handlers': handler_names,
            'propagate': False
        },
        # SQLALCHEMY_ECHO controls the engine's own level
        'sqlalchemy.engine': {
            'handlers': handler_names,
            'propagate': False
        }
    }

    return {
        'version': 1,
        'disable_existing_loggers': False,
        'formatters': formatters,
        'handlers': handlers,
        'loggers': loggers
    }


def configure_app_logging(app, settings):
    """
    Apply logging settings to the process and the Flask app

    Args:
        app: Flask application instance
        settings: ``ecomm.config.Settings`` instance
    """
    config = build_logging_config(
        log_level=settings.log_level,
        log_format=settings.log_format,
        log_file=settings.log_file,
        service_name=settings.service_name
    )
    logging.config.dictConfig(config)

    app.logger.setLevel(getattr(logging, settings.log_level.upper(), logging.INFO))

    logging.getLogger(__name__).info(
        'Application logging configured',
        extra={
            'event_type': 'app_startup',
            'log_level': settings.log_level,
            'log_format': settings.log_format,
        }
    )

    return config
