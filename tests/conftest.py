"""pytest fixtures for testing."""

import pytest
from unittest.mock import Mock

from config import Config
from pihole_client import PiholeClient
from store import StatusStore
from toggle_service import ToggleService


@pytest.fixture
def config(tmp_path):
    """Configuration with defaults and a temporary static directory."""
    return Config(
        app_port=3000,
        app_host="127.0.0.1",
        pihole_api_url="https://pi.hole/api",
        static_dir=str(tmp_path),
    )


@pytest.fixture
def upstream_domains():
    """Regex deny list as returned by GET /domains/deny/regex."""
    return {
        "domains": [
            {"id": 1, "domain": "a.com", "comment": "c", "enabled": True},
            {"id": 2, "domain": "b.com", "comment": "d", "enabled": False},
            {"id": 7, "domain": "(^|\\.)tiktok\\.com$", "comment": None, "enabled": True},
        ]
    }


@pytest.fixture
def mock_client(upstream_domains):
    """Mock Pi-hole client that answers like a healthy appliance."""
    from models import DomainRule

    mock = Mock(spec=PiholeClient)
    mock.get_deny_regex_rules.return_value = [
        DomainRule.from_dict(item) for item in upstream_domains["domains"]
    ]
    mock.get_blocking.return_value = {"blocking": "enabled", "timer": None}
    mock.set_blocking.return_value = {"blocking": "disabled", "timer": 120, "took": 0.001}
    mock.update_deny_regex_rule.return_value = {"domains": [], "processed": {"success": [], "errors": []}}
    mock.get_client_info.return_value = {"addr": "192.168.1.20", "name": None}
    return mock


@pytest.fixture
def store():
    return StatusStore()


@pytest.fixture
def service(config, mock_client, store):
    return ToggleService(config, mock_client, store)
