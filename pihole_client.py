"""
Pi-hole API client for the deny-list and blocking endpoints
"""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import requests
import urllib3

from models import DomainRule
from logger import logger
from exceptions import UpstreamError


# The appliance usually runs with a self-signed certificate
urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)


class PiholeClient:
    """Thin Pi-hole API client; every failure surfaces as UpstreamError"""

    def __init__(self, base_url: str, request_timeout: Optional[float] = None):
        self.base_url = base_url.rstrip('/')
        self.request_timeout = request_timeout
        self.session = requests.Session()
        self.session.verify = False
        self.session.headers.update({'Content-Type': 'application/json'})

        logger.info("Initializing Pi-hole client",
                   base_url=self.base_url,
                   request_timeout=self.request_timeout)

    def _request(self, method: str, path: str, operation: str, payload: Dict = None) -> Any:
        """Send one request and return the decoded body.

        No retries: a network error raises UpstreamError without a status,
        a non-2xx reply raises it with the reply's status code.
        """
        url = f"{self.base_url}{path}"
        start_time = time.time()
        try:
            response = self.session.request(method, url, json=payload, timeout=self.request_timeout)
        except requests.RequestException as e:
            logger.pihole_api_call(operation, False)
            raise UpstreamError(str(e)) from e
        duration_ms = (time.time() - start_time) * 1000

        if not response.ok:
            logger.pihole_api_call(operation, False, duration_ms)
            logger.debug(f"Pi-hole {operation} reply body", body=response.text[:500])
            raise UpstreamError(f"Request failed with status code {response.status_code}",
                                status_code=response.status_code)

        logger.pihole_api_call(operation, True, duration_ms)
        try:
            return response.json()
        except ValueError:
            return response.text

    def get_deny_regex_rules(self) -> List[DomainRule]:
        """Get all regex deny-list rules in upstream order"""
        data = self._request('GET', '/domains/deny/regex', 'get_domains')
        if not isinstance(data, dict) or not isinstance(data.get('domains'), list):
            raise UpstreamError("Unexpected domain list format from Pi-hole API")

        rules = [DomainRule.from_dict(item) for item in data['domains'] if isinstance(item, dict)]
        logger.debug(f"Retrieved {len(rules)} regex deny rules from Pi-hole")
        return rules

    def update_deny_regex_rule(self, domain: str, enabled: bool, comment: Optional[str]) -> Any:
        """Switch a regex deny rule on or off, addressed by its pattern"""
        # Patterns contain '/', '(' and friends, so escape everything outside the unreserved set
        path = f"/domains/deny/regex/{quote(domain, safe='')}"
        payload = {
            "enabled": enabled,
            "comment": comment
        }
        return self._request('PUT', path, 'update_domain', payload)

    def get_blocking(self) -> Any:
        """Get the raw global blocking state"""
        return self._request('GET', '/dns/blocking', 'get_blocking')

    def set_blocking(self, blocking, timer) -> Any:
        """Set global blocking; timer is how long a disable lasts"""
        payload = {
            "blocking": blocking,
            "timer": timer
        }
        return self._request('POST', '/dns/blocking', 'set_blocking', payload)

    def get_client_info(self) -> Any:
        """Diagnostic call describing the requesting client"""
        return self._request('GET', '/info/client', 'client_info')
