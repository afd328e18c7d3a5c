"""
Proxy operations between the web client and the Pi-hole API
"""

from typing import Any, Dict, Optional

from config import Config
from models import BlockingStatus, parse_blocking_state, parse_int_prefix, parse_timer
from pihole_client import PiholeClient
from store import StatusStore
from logger import logger
from exceptions import UpstreamError, ValidationError


class ToggleService:
    """Implements the /api operations on top of a Pi-hole client and a status store"""

    def __init__(self, config: Config, client: PiholeClient, store: StatusStore):
        self.config = config
        self.client = client
        self.store = store

    def get_config(self) -> Dict:
        return self.config.public_view()

    def parse_count(self, value: Optional[str]) -> int:
        """Number of rules to return; zero, negative or garbage means the default"""
        count = parse_int_prefix(value)
        if not count or count <= 0:
            return self.config.default_domain_count
        return count

    def get_domain_status_all(self, num: Optional[str] = None) -> Dict[str, Dict]:
        """Fetch every regex deny rule, re-index all of them, return the first ``num``.

        The whole list is indexed so that a later toggle by id resolves even
        when the rule was not part of the returned slice.
        """
        rules = self.client.get_deny_regex_rules()
        self.store.replace_rules(rules)

        count = self.parse_count(num)
        limited = self.store.first_rules(count)

        self.get_blocking_status()

        return {key: rule.to_dict() for key, rule in limited.items()}

    def set_domain_status(self, body: Dict) -> Any:
        """Switch one rule on or off.

        Returns the Pi-hole reply, or None when the id is not in the index
        (no upstream call is made in that case).
        """
        rule_id = body.get('id')
        enabled = body.get('enabled')
        if rule_id is None or rule_id == '' or not isinstance(enabled, bool):
            raise ValidationError("Both id and a boolean enabled are required")

        rule = self.store.get_rule(rule_id)
        if rule is None:
            logger.warning(f"Rule {rule_id} is not in the current index, ignoring toggle",
                           rule_id=rule_id,
                           indexed_rules=self.store.rule_count())
            return None

        response = self.client.update_deny_regex_rule(rule.domain, enabled, rule.comment)
        logger.domain_toggled(rule.domain, enabled)
        return response

    def get_blocking_status(self) -> BlockingStatus:
        """Refresh the cached blocking status, falling back to it on failure"""
        try:
            data = self.client.get_blocking()
        except UpstreamError as e:
            logger.error(f"Error getting blocking status: {e}")
            return self.store.get_blocking_status()

        if not isinstance(data, dict):
            logger.error("Unexpected blocking status format from Pi-hole API")
            return self.store.get_blocking_status()

        status = BlockingStatus(
            blocking=parse_blocking_state(data.get('blocking') or ''),
            timer=parse_timer(data.get('timer'))
        )
        self.store.set_blocking_status(status)
        return status

    def set_blocking_status(self, body: Dict) -> Any:
        """Enable blocking, or disable it for ``timer`` seconds.

        The cached status is taken from the request, not from Pi-hole's reply.
        """
        if 'blocking' not in body or 'timer' not in body:
            raise ValidationError("Both blocking and timer are required")

        blocking = body['blocking']
        timer = body['timer']

        status = BlockingStatus(blocking=blocking is True,
                                timer=0 if blocking is True else parse_timer(timer))

        response = self.client.set_blocking(blocking, 0 if blocking is True else timer)

        self.store.set_blocking_status(status)
        logger.blocking_changed(status.blocking, status.timer)
        return response
