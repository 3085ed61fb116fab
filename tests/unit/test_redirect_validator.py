import pytest

from app.services.redirect_validator import (
    DenyReason,
    RedirectValidator,
    Verdict,
    parse_absolute_url,
)


@pytest.fixture
def validator():
    return RedirectValidator(["trusted.com", "example.com"])


def test_allows_listed_host(validator):
    assert validator.classify("http://trusted.com/page") is Verdict.allow
    assert validator.classify("https://example.com/a/b?c=d#e") is Verdict.allow


def test_denies_unlisted_host(validator):
    classification = validator.evaluate("http://malicious.com")
    assert classification.verdict is Verdict.deny
    assert classification.reason is DenyReason.host_not_allowed
    assert classification.hostname == "malicious.com"


@pytest.mark.parametrize(
    "candidate",
    [
        "http://trusted.com.evil.com",
        "http://evil-trusted.com",
        "http://sub.trusted.com",
        "http://rusted.com",
        "http://trusted.co",
        "http://evil.com/trusted.com",
        "http://evil.com?next=http://trusted.com",
        "http://trusted.com@evil.com",
    ],
)
def test_lookalike_hosts_are_denied(validator, candidate):
    assert validator.classify(candidate) is Verdict.deny


@pytest.mark.parametrize(
    "candidate",
    [
        "not a url",
        "trusted.com",
        "/relative/path",
        "//trusted.com/page",
        "http:///trusted.com",
        "mailto:admin@trusted.com",
        "http://",
        "http://[::1",
        "http://trusted.com:99999/",
        "http://trusted.com:abc/",
        "http://trusted.com\\@evil.com",
        "http://trusted.com/\r\nSet-Cookie: a=1",
        " http://trusted.com/",
        "http://trusted.com/\ud800",
    ],
)
def test_unparseable_candidates_are_malformed(validator, candidate):
    classification = validator.evaluate(candidate)
    assert classification.verdict is Verdict.deny
    assert classification.reason is DenyReason.malformed


@pytest.mark.parametrize("candidate", [None, ""])
def test_absent_input_is_denied_as_missing(validator, candidate):
    classification = validator.evaluate(candidate)
    assert classification.verdict is Verdict.deny
    assert classification.reason is DenyReason.missing


def test_non_string_input_is_denied(validator):
    assert validator.classify(b"http://trusted.com") is Verdict.deny
    assert validator.classify(["http://trusted.com"]) is Verdict.deny


def test_host_case_follows_parser(validator):
    # urlsplit lower-cases the hostname before comparison.
    assert validator.classify("HTTP://TRUSTED.COM") is Verdict.allow


def test_trailing_dot_is_not_normalized(validator):
    classification = validator.evaluate("http://trusted.com./")
    assert classification.verdict is Verdict.deny
    assert classification.hostname == "trusted.com."


def test_port_and_userinfo_do_not_affect_host_match(validator):
    assert validator.classify("http://trusted.com:8080/page") is Verdict.allow
    assert validator.classify("https://user:pw@trusted.com/") is Verdict.allow


def test_empty_allow_list_denies_everything():
    assert RedirectValidator([]).classify("http://trusted.com") is Verdict.deny


def test_scheme_restriction_when_configured():
    validator = RedirectValidator(["trusted.com"], allowed_schemes=["https"])
    assert validator.classify("https://trusted.com/") is Verdict.allow
    classification = validator.evaluate("javascript://trusted.com/%0aalert(1)")
    assert classification.reason is DenyReason.malformed


def test_any_scheme_accepted_by_default(validator):
    assert validator.classify("ftp://trusted.com/file") is Verdict.allow


def test_disabled_allow_list_accepts_any_present_candidate():
    validator = RedirectValidator(["trusted.com"], enforce_allow_list=False)
    assert validator.classify("http://malicious.com") is Verdict.allow
    assert validator.classify("not a url") is Verdict.allow
    assert validator.evaluate(None).reason is DenyReason.missing


def test_allow_list_is_immutable(validator):
    hosts = ["trusted.com"]
    validator = RedirectValidator(hosts)
    hosts.append("evil.com")
    assert validator.allowed_hosts == frozenset({"trusted.com"})
    assert validator.classify("http://evil.com") is Verdict.deny


def test_is_allowed_matches_classify(validator):
    assert validator.is_allowed("http://trusted.com/page")
    assert not validator.is_allowed("http://malicious.com")


def test_parse_absolute_url_returns_split_result():
    parsed = parse_absolute_url("https://Example.com:8443/x?y=1")
    assert parsed is not None
    assert parsed.hostname == "example.com"
    assert parsed.port == 8443
    assert parse_absolute_url("example.com/x") is None
