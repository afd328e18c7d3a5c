"""
In-memory rule index and blocking status cache
"""

import threading
from typing import Dict, List, Optional

from models import DomainRule, BlockingStatus
from logger import logger


class StatusStore:
    """Holds the last fetched rule list and the last known blocking status.

    Both values are only ever replaced wholesale; nothing is mutated in place.
    Nothing survives a restart.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._rules: Dict[str, DomainRule] = {}
        self._blocking_status = BlockingStatus()

    def replace_rules(self, rules: List[DomainRule]):
        """Replace the index with a freshly fetched rule list, keeping upstream order"""
        index = {}
        for rule in rules:
            index[rule.key] = rule
        with self._lock:
            self._rules = index
        logger.debug(f"Rule index rebuilt with {len(index)} rules", rule_count=len(index))

    def get_rule(self, rule_id) -> Optional[DomainRule]:
        """Look up a rule by id; ids from the browser arrive as strings"""
        with self._lock:
            return self._rules.get(str(rule_id))

    def first_rules(self, count: int) -> Dict[str, DomainRule]:
        """The first ``count`` rules of the last fetch, keyed by id"""
        with self._lock:
            keys = list(self._rules)[:count]
            return {key: self._rules[key] for key in keys}

    def rule_count(self) -> int:
        with self._lock:
            return len(self._rules)

    def get_blocking_status(self) -> BlockingStatus:
        with self._lock:
            return self._blocking_status

    def set_blocking_status(self, status: BlockingStatus):
        with self._lock:
            self._blocking_status = status
