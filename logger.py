"""
Structured logging with configurable levels and request counters
"""

import os
import json
import logging
import sys
from datetime import datetime
from typing import Dict, Any, Optional


class StructuredFormatter(logging.Formatter):
    """Custom formatter for structured JSON logging"""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as structured JSON"""
        log_entry = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
            "module": record.module,
            "function": record.funcName,
            "line": record.lineno,
        }

        if hasattr(record, 'extra_fields'):
            log_entry.update(record.extra_fields)

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, default=str)


class ConsoleFormatter(logging.Formatter):
    """Human-readable console formatter"""

    def __init__(self):
        super().__init__(
            fmt='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )


class Logger:
    """Logger with structured fields and proxy counters"""

    def __init__(self, name: str = "pihole-toggle"):
        self.name = name
        self.logger = logging.getLogger(name)
        self._setup_logging()
        self._metrics = {
            "api_calls": 0,
            "api_errors": 0,
            "domain_toggles": 0,
            "blocking_changes": 0,
            "errors": 0,
            "warnings": 0
        }

    def _setup_logging(self):
        """Setup logging configuration"""
        self.logger.handlers.clear()

        log_level = os.getenv('LOG_LEVEL', 'INFO').upper()
        self.logger.setLevel(getattr(logging, log_level, logging.INFO))

        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(ConsoleFormatter())
        self.logger.addHandler(console_handler)

        if os.getenv('JSON_LOGGING', 'false').lower() == 'true':
            json_handler = logging.StreamHandler(sys.stderr)
            json_handler.setFormatter(StructuredFormatter())
            self.logger.addHandler(json_handler)

        # Prevent duplicate logs
        self.logger.propagate = False

    def _log_with_extra(self, level: int, message: str, extra_fields: Optional[Dict[str, Any]] = None):
        """Log with extra structured fields"""
        if extra_fields:
            self.logger.log(level, message, extra={'extra_fields': extra_fields})
        else:
            self.logger.log(level, message)

    def debug(self, message: str, **kwargs):
        """Log debug message with optional extra fields"""
        self._log_with_extra(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs):
        """Log info message with optional extra fields"""
        self._log_with_extra(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs):
        """Log warning message with optional extra fields"""
        self._metrics["warnings"] += 1
        self._log_with_extra(logging.WARNING, message, kwargs)

    def error(self, message: str, **kwargs):
        """Log error message with optional extra fields"""
        self._metrics["errors"] += 1
        self._log_with_extra(logging.ERROR, message, kwargs)

    def pihole_api_call(self, operation: str, success: bool, duration_ms: float = None):
        """Log Pi-hole API call"""
        self._metrics["api_calls"] += 1
        level = logging.DEBUG if success else logging.ERROR
        message = f"Pi-hole API {operation}: {'success' if success else 'failed'}"

        extra_fields = {
            "operation": "pihole_api_call",
            "api_operation": operation,
            "success": success
        }

        if duration_ms is not None:
            extra_fields["duration_ms"] = duration_ms

        if not success:
            self._metrics["api_errors"] += 1

        self._log_with_extra(level, message, extra_fields)

    def domain_toggled(self, domain: str, enabled: bool):
        """Log a deny-list rule switch"""
        self._metrics["domain_toggles"] += 1
        self.info(f"Set rule {domain} enabled={enabled}",
                 operation="domain_toggled",
                 domain=domain,
                 enabled=enabled)

    def blocking_changed(self, blocking: bool, timer: int):
        """Log a global blocking change"""
        self._metrics["blocking_changes"] += 1
        if blocking:
            message = "Ad-blocking enabled"
        else:
            message = f"Ad-blocking disabled for {timer}s"
        self.info(message,
                 operation="blocking_changed",
                 blocking=blocking,
                 timer=timer)

    def request_handled(self, method: str, path: str, status: int):
        """Log an HTTP request served by the proxy"""
        self.debug(f"{method} {path} -> {status}",
                  operation="request_handled",
                  method=method,
                  path=path,
                  status=status)

    def health_check(self, component: str, healthy: bool, details: str = None):
        """Log health check result"""
        level = logging.INFO if healthy else logging.WARNING
        message = f"Health check {component}: {'healthy' if healthy else 'unhealthy'}"

        extra_fields = {
            "operation": "health_check",
            "component": component,
            "healthy": healthy
        }

        if details:
            extra_fields["details"] = details

        self._log_with_extra(level, message, extra_fields)

    def get_metrics(self) -> Dict[str, Any]:
        """Get current metrics"""
        return {
            **self._metrics,
            "uptime_seconds": (datetime.now() - self._start_time).total_seconds() if hasattr(self, '_start_time') else 0
        }

    def set_start_time(self):
        """Set application start time for uptime calculation"""
        self._start_time = datetime.now()


# Global logger instance
logger = Logger()
