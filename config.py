"""
Environment configuration for the Pi-hole toggle proxy
"""

import os
from dataclasses import dataclass
from typing import Dict, Optional

from exceptions import ConfigurationError


DEFAULT_STATIC_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), 'public')


@dataclass
class Config:
    """Process configuration loaded from environment variables"""
    app_port: int = 3000
    app_host: str = '0.0.0.0'
    pihole_api_url: str = 'http://localhost:3001/api'
    back_end_url: str = ''
    request_timeout: Optional[float] = None
    default_domain_count: int = 5
    static_dir: str = DEFAULT_STATIC_DIR
    health_cache_duration: int = 30

    @classmethod
    def from_env(cls) -> "Config":
        """Load and validate configuration.

        Raises:
            ConfigurationError: If a variable is not a number where one is
                expected or falls outside its allowed range.
        """
        config = cls(
            app_port=cls._get_int('APP_PORT', '3000'),
            app_host=os.getenv('APP_HOST', '0.0.0.0'),
            pihole_api_url=os.getenv('PIHOLE_API_URL', 'http://localhost:3001/api').rstrip('/'),
            back_end_url=os.getenv('BACK_END_URL', ''),
            request_timeout=cls._get_timeout(),
            default_domain_count=cls._get_int('DEFAULT_DOMAIN_COUNT', '5'),
            static_dir=os.getenv('STATIC_DIR', DEFAULT_STATIC_DIR),
            health_cache_duration=cls._get_int('HEALTH_CACHE_DURATION', '30'),
        )
        config.validate()
        return config

    @staticmethod
    def _get_int(key: str, default: str) -> int:
        value = os.getenv(key, default)
        try:
            return int(value)
        except ValueError:
            raise ConfigurationError(f"{key} must be an integer, got {value!r}")

    @staticmethod
    def _get_timeout() -> Optional[float]:
        value = os.getenv('PIHOLE_REQUEST_TIMEOUT')
        if not value:
            return None
        try:
            return float(value)
        except ValueError:
            raise ConfigurationError(f"PIHOLE_REQUEST_TIMEOUT must be a number, got {value!r}")

    def validate(self):
        """Validate configuration ranges"""
        if self.app_port < 1 or self.app_port > 65535:
            raise ConfigurationError(f"APP_PORT must be between 1 and 65535, got {self.app_port}")

        if not self.pihole_api_url.startswith(('http://', 'https://')):
            raise ConfigurationError(f"PIHOLE_API_URL must be an http(s) URL, got {self.pihole_api_url!r}")

        if self.request_timeout is not None and (self.request_timeout < 1 or self.request_timeout > 300):
            raise ConfigurationError(f"PIHOLE_REQUEST_TIMEOUT must be between 1 and 300 seconds, got {self.request_timeout}")

        if self.default_domain_count < 1 or self.default_domain_count > 1000:
            raise ConfigurationError(f"DEFAULT_DOMAIN_COUNT must be between 1 and 1000, got {self.default_domain_count}")

        if self.health_cache_duration < 5 or self.health_cache_duration > 300:
            raise ConfigurationError(f"HEALTH_CACHE_DURATION must be between 5 and 300 seconds, got {self.health_cache_duration}")

    def public_view(self) -> Dict:
        """Values the web client is allowed to see"""
        data = {
            "APP_PORT": self.app_port,
            "PIHOLE_API_URL": self.pihole_api_url,
        }
        if self.back_end_url:
            data["BACK_END_URL"] = self.back_end_url
        return data
