"""Per-site disable rules.

A rule disables keyboard navigation on pages whose URL it matches. Rules
come in four kinds: exact URL, URL prefix, domain (subdomains included) and
regular expression. Rules can be switched off without being deleted.
"""

from __future__ import annotations

import logging
import re
import uuid
from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any
from urllib.parse import urlparse

logger = logging.getLogger(__name__)


class RuleType(str, Enum):
    EXACT = "exact"
    PREFIX = "prefix"
    DOMAIN = "domain"
    REGEXP = "regexp"


@dataclass
class BlocklistRule:
    type: RuleType
    value: str
    enabled: bool = True
    id: str = field(default_factory=lambda: uuid.uuid4().hex)

    def matches(self, url: str) -> bool:
        if not self.enabled:
            return False
        if self.type is RuleType.EXACT:
            return url == self.value
        if self.type is RuleType.PREFIX:
            return url.startswith(self.value)
        if self.type is RuleType.DOMAIN:
            host = (urlparse(url).hostname or "").lower()
            domain = self.value.lower().strip(".")
            return host == domain or host.endswith("." + domain)
        try:
            return re.search(self.value, url) is not None
        except re.error as exc:
            logger.warning("Ignoring invalid blocklist pattern %r: %s", self.value, exc)
            return False

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["type"] = self.type.value
        return data


def suggest_rule_value(rule_type: RuleType, url: str) -> str:
    """Pre-filled rule value for the page at ``url``."""
    if rule_type is RuleType.DOMAIN:
        return urlparse(url).hostname or ""
    if rule_type is RuleType.REGEXP:
        return f"^{re.escape(url)}$"
    return url


class Blocklist:
    """Ordered collection of rules."""

    def __init__(self, rules: list[BlocklistRule] | None = None) -> None:
        self.rules: list[BlocklistRule] = list(rules or [])

    def __len__(self) -> int:
        return len(self.rules)

    def add(self, rule_type: RuleType | str, value: str) -> BlocklistRule | None:
        """Add a rule; returns None when an identical type/value rule exists."""
        rule_type = RuleType(rule_type)
        for rule in self.rules:
            if rule.type is rule_type and rule.value == value:
                return None
        rule = BlocklistRule(type=rule_type, value=value)
        self.rules.append(rule)
        return rule

    def toggle(self, rule_id: str) -> bool:
        for rule in self.rules:
            if rule.id == rule_id:
                rule.enabled = not rule.enabled
                return True
        return False

    def delete(self, rule_id: str) -> bool:
        before = len(self.rules)
        self.rules = [rule for rule in self.rules if rule.id != rule_id]
        return len(self.rules) != before

    def is_blocked(self, url: str) -> bool:
        return any(rule.matches(url) for rule in self.rules)

    def to_list(self) -> list[dict[str, Any]]:
        return [rule.to_dict() for rule in self.rules]

    @classmethod
    def from_list(cls, data: list[Any]) -> Blocklist:
        """Parse stored rules.

        Raises:
            ValueError: If an entry is malformed.
        """
        rules = []
        for i, item in enumerate(data):
            if not isinstance(item, dict):
                raise ValueError(f"Blocklist rule at index {i} must be an object.")
            try:
                rule_type = RuleType(item.get("type"))
            except ValueError:
                raise ValueError(f'Blocklist rule at index {i} has unknown "type".') from None
            value = item.get("value")
            if not isinstance(value, str) or not value:
                raise ValueError(f'Blocklist rule at index {i} missing required "value".')
            enabled = item.get("enabled", True)
            if not isinstance(enabled, bool):
                raise ValueError(f'Blocklist rule at index {i} "enabled" must be a boolean.')
            rule_id = item.get("id") or uuid.uuid4().hex
            rules.append(BlocklistRule(type=rule_type, value=value, enabled=enabled, id=str(rule_id)))
        return cls(rules)


def is_enabled_for(url: str | None, disabled_globally: bool, blocklist: Blocklist) -> bool:
    """Whether keyboard navigation should run on ``url``."""
    if disabled_globally:
        return False
    if url is None:
        return True
    return not blocklist.is_blocked(url)
