"""Redirect target validation.

Decides whether a caller-supplied destination may be used as a redirect
target. Every input ends in a verdict; nothing here raises for bad input.
"""

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache
from urllib.parse import SplitResult, urlsplit

from app.core.config import get_settings


class Verdict(str, Enum):
    allow = "allow"
    deny = "deny"


class DenyReason(str, Enum):
    missing = "missing"
    malformed = "malformed"
    host_not_allowed = "host_not_allowed"


@dataclass(frozen=True)
class Classification:
    verdict: Verdict
    reason: DenyReason | None = None
    hostname: str | None = None

    @property
    def allowed(self) -> bool:
        return self.verdict is Verdict.allow


def _has_unsafe_characters(value: str) -> bool:
    for char in value:
        if char.isspace() or char == "\\" or ord(char) < 0x20 or ord(char) == 0x7F:
            return True
    return False


def parse_absolute_url(candidate: str) -> SplitResult | None:
    """Parse ``candidate`` as ``scheme://authority[/path]`` or return None."""
    if _has_unsafe_characters(candidate):
        return None
    try:
        candidate.encode("utf-8")
        parsed = urlsplit(candidate)
        # Raises ValueError for non-numeric or out-of-range ports.
        parsed.port
    except (UnicodeEncodeError, ValueError):
        return None
    if not parsed.scheme or not parsed.netloc or not parsed.hostname:
        return None
    return parsed


class RedirectValidator:
    """Exact-hostname allow-list check for redirect targets.

    The hostname is compared as the parser delivers it. ``urlsplit`` lower-cases
    it; trailing dots and IDN forms are left untouched, so ``trusted.com.`` does
    not match ``trusted.com``.
    """

    def __init__(
        self,
        allowed_hosts: Iterable[str],
        enforce_allow_list: bool = True,
        allowed_schemes: Iterable[str] = (),
    ) -> None:
        self._allowed_hosts = frozenset(allowed_hosts)
        self._allowed_schemes = frozenset(allowed_schemes)
        self._enforce_allow_list = enforce_allow_list

    @property
    def allowed_hosts(self) -> frozenset[str]:
        return self._allowed_hosts

    @property
    def enforce_allow_list(self) -> bool:
        return self._enforce_allow_list

    def evaluate(self, candidate: str | None) -> Classification:
        if not candidate or not isinstance(candidate, str):
            return Classification(Verdict.deny, DenyReason.missing)

        if not self._enforce_allow_list:
            return Classification(Verdict.allow)

        parsed = parse_absolute_url(candidate)
        if parsed is None:
            return Classification(Verdict.deny, DenyReason.malformed)
        if self._allowed_schemes and parsed.scheme not in self._allowed_schemes:
            return Classification(Verdict.deny, DenyReason.malformed, parsed.hostname)

        if parsed.hostname not in self._allowed_hosts:
            return Classification(Verdict.deny, DenyReason.host_not_allowed, parsed.hostname)
        return Classification(Verdict.allow, hostname=parsed.hostname)

    def classify(self, candidate: str | None) -> Verdict:
        return self.evaluate(candidate).verdict

    def is_allowed(self, candidate: str | None) -> bool:
        return self.classify(candidate) is Verdict.allow


@lru_cache
def get_redirect_validator() -> RedirectValidator:
    settings = get_settings()
    return RedirectValidator(
        allowed_hosts=settings.allowed_redirect_host_set,
        enforce_allow_list=settings.enforce_allow_list,
        allowed_schemes=settings.allowed_redirect_scheme_set,
    )
