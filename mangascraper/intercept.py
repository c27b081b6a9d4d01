"""Per-request allow/deny decisions for browser network traffic."""

from typing import Literal
from urllib.parse import urlparse

import pydantic
from pydantic import BaseModel
from playwright.async_api import Route

from .errors import ValidationError

MatchKind = Literal["domain", "resource_type"]
Mode = Literal["block", "unblock"]
Decision = Literal["allow", "deny"]

_CONFIG_KEYS = {"domains": ("domain", "value"), "resource": ("resource_type", "type")}


def url_matches(url: str, value: str) -> bool:
    """Match a request URL against a domain rule value.

    Values with a scheme are URL prefixes. Bare hosts match the host
    itself and any subdomain of it.
    """
    if "://" in value:
        return url.startswith(value)
    host = (urlparse(url).hostname or "").lower()
    value = value.lower().strip("/")
    return host == value or host.endswith("." + value)


class InterceptionRule(BaseModel):
    """One block/unblock rule over domains or resource types."""
    match_kind: MatchKind
    mode: Mode
    values: frozenset[str]

    class Config:
        frozen = True

    def matches(self, url: str, resource_type: str) -> bool:
        if self.match_kind == "domain":
            return any(url_matches(url, value) for value in self.values)
        return resource_type in self.values


class InterceptionPolicy(BaseModel):
    """Ordered, immutable rule set. Safe to share across sessions."""
    rules: tuple[InterceptionRule, ...] = ()

    class Config:
        frozen = True

    @classmethod
    def from_config(cls, config: dict | None) -> "InterceptionPolicy":
        """Build a policy from the adapter-facing form.

        {"domains": {"method": "block", "value": [...]},
         "resource": {"method": "unblock", "type": [...]}}
        """
        if not config:
            return cls()
        if not isinstance(config, dict):
            raise ValidationError(f"Interception config must be a dict, got {type(config).__name__}")
        unknown = set(config) - set(_CONFIG_KEYS)
        if unknown:
            raise ValidationError(f"Unknown interception keys: {sorted(unknown)}")

        rules = []
        for key, (match_kind, values_key) in _CONFIG_KEYS.items():
            entry = config.get(key)
            if entry is None:
                continue
            if not isinstance(entry, dict):
                raise ValidationError(f"'{key}' must be a dict, got {type(entry).__name__}")
            method = entry.get("method")
            if method not in ("block", "unblock"):
                raise ValidationError(f"'{key}.method' must be 'block' or 'unblock', got {method!r}")
            values = entry.get(values_key) or []
            if isinstance(values, str):
                values = [values]
            if not isinstance(values, (list, tuple, set, frozenset)):
                raise ValidationError(f"'{key}.{values_key}' must be a list, got {type(values).__name__}")
            try:
                rules.append(InterceptionRule(match_kind=match_kind, mode=method, values=values))
            except pydantic.ValidationError as e:
                raise ValidationError(f"'{key}.{values_key}' must be a list of strings", cause=e) from e
        return cls(rules=tuple(rules))

    def _rules(self, match_kind: MatchKind, mode: Mode) -> list[InterceptionRule]:
        return [r for r in self.rules if r.match_kind == match_kind and r.mode == mode]

    def decide(self, url: str, resource_type: str) -> Decision:
        """Return "allow" or "deny" for one outgoing request.

        Domain blocks win over everything. An explicit domain unblock
        allows next. Resource types are then filtered: a block rule
        denies its types, and once any unblock rule exists only the
        listed types pass. With no resource rule the request is allowed.
        """
        for rule in self._rules("domain", "block"):
            if rule.matches(url, resource_type):
                return "deny"
        for rule in self._rules("domain", "unblock"):
            if rule.matches(url, resource_type):
                return "allow"

        for rule in self._rules("resource_type", "block"):
            if rule.matches(url, resource_type):
                return "deny"
        allow_lists = self._rules("resource_type", "unblock")
        if allow_lists:
            if any(rule.matches(url, resource_type) for rule in allow_lists):
                return "allow"
            return "deny"
        return "allow"

    def allows(self, url: str, resource_type: str) -> bool:
        return self.decide(url, resource_type) == "allow"


def make_route_handler(policy: InterceptionPolicy):
    """Playwright route handler applying `policy` to every request."""

    async def handle_route(route: Route):
        request = route.request
        if policy.allows(request.url, request.resource_type):
            await route.continue_()
        else:
            await route.abort()

    return handle_route
