"""
Logging setup for the authgate service and its uvicorn server.

Monitoring traffic (load balancer health checks, metrics scrapes) is dropped from
the access log so that it does not drown out real requests.
"""

import logging
import logging.config
from typing import Any, Dict, Iterable

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

MONITORING_PATHS = ("/health", "/metrics")

SERVER_LOGGERS = ("uvicorn", "uvicorn.error")


class MonitoringAccessFilter(logging.Filter):
    """Drop uvicorn access records for GET requests on monitoring paths."""

    def __init__(self, paths: Iterable[str] = MONITORING_PATHS):
        super().__init__()
        self.paths = frozenset(paths)

    def filter(self, record: logging.LogRecord) -> bool:
        if record.name != "uvicorn.access":
            return True

        # uvicorn passes (client, method, path, http_version, status)
        args = record.args
        if isinstance(args, tuple) and len(args) == 5:
            method, path = args[1], str(args[2])
        else:
            parts = record.getMessage().split('"')
            request_line = parts[1].split() if len(parts) > 1 else []
            if len(request_line) < 2:
                return True
            method, path = request_line[0], request_line[1]

        return not (method == "GET" and path.split("?", 1)[0] in self.paths)


def get_logging_config(level: str = "INFO", monitoring_paths: Iterable[str] = MONITORING_PATHS) -> Dict[str, Any]:
    """Build a dictConfig mapping; ``level`` applies to authgate and the root logger."""
    level = level.upper()

    loggers: Dict[str, Any] = {
        name: {"handlers": ["console"], "level": "INFO", "propagate": False}
        for name in SERVER_LOGGERS
    }
    loggers["uvicorn.access"] = {"handlers": ["access"], "level": "INFO", "propagate": False}
    loggers["authgate"] = {"handlers": ["console"], "level": level, "propagate": False}

    return {
        "version": 1,
        "disable_existing_loggers": False,
        "filters": {
            "monitoring": {"()": MonitoringAccessFilter, "paths": list(monitoring_paths)},
        },
        "formatters": {
            "standard": {"format": LOG_FORMAT},
            "access": {"format": "%(message)s"},
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "standard",
                "stream": "ext://sys.stdout",
            },
            "access": {
                "class": "logging.StreamHandler",
                "formatter": "access",
                "stream": "ext://sys.stdout",
                "filters": ["monitoring"],
            },
        },
        "loggers": loggers,
        "root": {"level": level, "handlers": ["console"]},
    }


def configure_logging(level: str = "INFO") -> None:
    logging.config.dictConfig(get_logging_config(level))
