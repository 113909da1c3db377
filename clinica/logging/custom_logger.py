"""
Custom logger for ledger events.
Levels: warning, info, request, error, slow, great
"""
import logging
import traceback
from datetime import datetime, timezone
from typing import Dict, Any

from clinica.logging.log_levels import LogLevel
from clinica.logging.formatters import get_formatter_for_level
from clinica.helpers.getters import isDebugMode


class CustomLogger:
    """
    Logger with per-level formatting and keyword context.

    Usage:
        logger = CustomLogger("clinica.services.coordinator")
        logger.info("Paquete creado", client_id=3, package_id=12)
        logger.error("Fallo al registrar pago", exc_info=True, package_id=12)
        logger.slow("Consulta lenta", duration=2.4, threshold=1.0)
    """

    def __init__(self, name: str):
        self.name = name
        self.logger = logging.getLogger(name)
        self.logger.setLevel(logging.DEBUG if isDebugMode() else logging.INFO)

        # Avoid duplicated handlers on re-instantiation
        self.logger.handlers.clear()
        self.logger.propagate = False

        console_handler = logging.StreamHandler()
        console_handler.setLevel(logging.DEBUG)
        console_handler.setFormatter(logging.Formatter('%(message)s'))
        self.logger.addHandler(console_handler)

    def _log(
        self,
        level: LogLevel,
        message: str,
        exc_info: bool = False,
        **context: Any
    ) -> None:
        log_data = {
            "level": level.value,
            "module": self.name,
            "timestamp": datetime.now(timezone.utc).isoformat(),
            **context
        }

        if exc_info:
            log_data["traceback"] = self._get_clean_traceback()

        record = logging.LogRecord(
            name=self.name,
            level=level.stdlib_level,
            pathname="",
            lineno=0,
            msg=message,
            args=(),
            exc_info=None
        )
        record.__dict__.update(log_data)
        record.context = self._format_context(context)
        formatted_message = get_formatter_for_level(level).format(record)

        self.logger.log(
            level.stdlib_level,
            formatted_message,
            extra={"custom_data": log_data},
            exc_info=exc_info
        )

    @staticmethod
    def _format_context(context: Dict[str, Any]) -> str:
        if not context:
            return ""
        return " | " + " ".join(f"{key}={value}" for key, value in context.items())

    def _get_clean_traceback(self) -> str:
        """Current traceback without duplicated or site-packages frames"""
        seen = set()
        clean_lines = []
        for line in traceback.format_exc().split('\n'):
            if line.strip() and line not in seen:
                if 'site-packages' not in line:
                    seen.add(line)
                    clean_lines.append(line)
        return '\n'.join(clean_lines)

    def warning(self, message: str, **context: Any) -> None:
        """
        Something deserves attention but is not a failure.

        Example:
            logger.warning("Pago excede el adeudo", package_id=4, debt=-150)
        """
        self._log(LogLevel.WARNING, message, **context)

    def info(self, message: str, **context: Any) -> None:
        self._log(LogLevel.INFO, message, **context)

    def request(
        self,
        message: str,
        method: str,
        path: str,
        status_code: int,
        duration: float,
        **context: Any
    ) -> None:
        """
        HTTP request log.

        Example:
            logger.request("API request", method="POST", path="/api/payments/",
                           status_code=201, duration=0.152)
        """
        self._log(
            LogLevel.REQUEST,
            message,
            method=method,
            path=path,
            status_code=status_code,
            duration=duration,
            **context
        )

    def error(
        self,
        message: str,
        exc_info: bool = True,
        **context: Any
    ) -> None:
        self._log(LogLevel.ERROR, message, exc_info=exc_info, **context)

    def slow(
        self,
        message: str,
        duration: float,
        threshold: float = 1.0,
        **context: Any
    ) -> None:
        """
        Slow operation, used to spot bottlenecks.

        Example:
            logger.slow("Request took too long", duration=5.2, threshold=1.0)
        """
        self._log(
            LogLevel.SLOW,
            message,
            duration=duration,
            threshold=threshold,
            **context
        )

    def great(self, message: str, **context: Any) -> None:
        """Positive milestone, e.g. a package fully paid."""
        self._log(LogLevel.GREAT, message, **context)


_loggers: Dict[str, CustomLogger] = {}


def get_logger(name: str) -> CustomLogger:
    """
    Get (or create) the custom logger for a module.

    Usage:
        from clinica.logging import get_logger
        logger = get_logger(__name__)
    """
    if name not in _loggers:
        _loggers[name] = CustomLogger(name)
    return _loggers[name]
