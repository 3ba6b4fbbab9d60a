"""dynaquery Logging: logging port and structlog adapter."""

from dynaquery.logging.port import LoggingPort
from dynaquery.logging.structlog_adapter import StructlogAdapter

__all__ = ["LoggingPort", "StructlogAdapter"]
