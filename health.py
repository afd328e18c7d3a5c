"""
Startup check and cached health status for the Pi-hole connection
"""

import threading
from datetime import datetime, timedelta
from typing import Dict, Any, Optional

from pihole_client import PiholeClient
from store import StatusStore
from logger import logger
from exceptions import UpstreamError


class HealthChecker:
    """Checks that the Pi-hole API answers the client info endpoint"""

    def __init__(self, client: PiholeClient, store: StatusStore, cache_duration: int = 30):
        self.client = client
        self.store = store
        self.cache_duration = cache_duration

        self._health_cache = {"healthy": False, "last_check": None, "error": None}
        self._lock = threading.Lock()

    def _check_pihole_health(self) -> Optional[str]:
        """Return None when healthy, otherwise a description of the failure"""
        try:
            data = self.client.get_client_info()
        except UpstreamError as e:
            if e.status_code is not None:
                return f"HTTP {e.status_code}: {e}"
            return str(e)

        if not isinstance(data, dict):
            return "Invalid JSON response from API"
        return None

    def startup_check(self) -> bool:
        """Single diagnostic call made before the server starts listening; no retry"""
        logger.info("Checking API connection...")
        error = self._check_pihole_health()
        self._update_health_cache(error is None, error)

        if error is not None:
            logger.error(f"Failed to connect to Pi-hole API: {error}")
            return False

        logger.info("Pi-hole API connection verified")
        return True

    def _is_cache_valid(self) -> bool:
        last_check = self._health_cache["last_check"]
        if not last_check:
            return False

        return datetime.now() - last_check < timedelta(seconds=self.cache_duration)

    def _update_health_cache(self, healthy: bool, error: Optional[str] = None):
        with self._lock:
            self._health_cache = {
                "healthy": healthy,
                "last_check": datetime.now(),
                "error": error
            }

    def check_pihole_connectivity(self) -> bool:
        """Check Pi-hole connectivity, reusing a recent result"""
        if self._is_cache_valid():
            return self._health_cache["healthy"]

        error = self._check_pihole_health()
        healthy = error is None
        logger.health_check("pihole", healthy, error)
        self._update_health_cache(healthy, error)
        return healthy

    def get_health_status(self) -> Dict[str, Any]:
        """Health payload served on /health"""
        healthy = self.check_pihole_connectivity()
        last_check = self._health_cache["last_check"]

        return {
            "status": "healthy" if healthy else "unhealthy",
            "timestamp": datetime.now().isoformat(),
            "pihole_healthy": healthy,
            "pihole_last_check": last_check.isoformat() if last_check else None,
            "pihole_error": self._health_cache["error"],
            "cached_rules": self.store.rule_count(),
            "metrics": logger.get_metrics()
        }

    def force_refresh(self):
        """Force the next check to hit the API"""
        with self._lock:
            self._health_cache["last_check"] = None
