import pytest

from sitegate.app.settings import GatePolicy
from sitegate.services.security.firewall import ALLOW, Firewall, compile_patterns
from sitegate.services.security.request_info import RequestInfo
from sitegate.services.security.state import BlockedIPSet, SuspicionCounter


class StaticGeo:
    def __init__(self, country):
        self.country = country

    def country_for(self, ip):
        return self.country


class BrokenGeo:
    def country_for(self, ip):
        raise RuntimeError("geo database unavailable")


def _info(ip="10.0.0.1", url="/api/services", user_agent="Mozilla/5.0", text=None):
    return RequestInfo(
        ip=ip,
        method="GET",
        url=url,
        user_agent=user_agent,
        host="localhost",
        text=text if text is not None else url,
    )


@pytest.fixture
def make_firewall(recording_log, blocked_repo):
    def _make(policy=None, geo=None):
        return Firewall(
            policy or GatePolicy(),
            recording_log,
            blocked=BlockedIPSet(),
            suspicion=SuspicionCounter(),
            geo=geo,
            repo=blocked_repo,
        )

    return _make


def test_clean_request_is_allowed(make_firewall, recording_log):
    firewall = make_firewall()
    assert firewall.analyze(_info()) == ALLOW
    assert recording_log.events == []


def test_blocked_ip_is_rejected_on_any_path(make_firewall, recording_log):
    firewall = make_firewall()
    firewall.block_ip("10.0.0.9", "manual")

    for url in ("/", "/api/site-data", "/health"):
        decision = firewall.analyze(_info(ip="10.0.0.9", url=url))
        assert decision.blocked is True
        assert decision.reason == "IP blocked"

    assert recording_log.count("blocked_ip_attempt") == 3
    assert firewall.analyze(_info(ip="10.0.0.10")).blocked is False


def test_suspicious_pattern_blocks_and_persists(make_firewall, recording_log, blocked_repo):
    firewall = make_firewall()
    decision = firewall.analyze(_info(text='/api/contact {"message": "<script>alert(1)</script>"}'))

    assert decision.blocked is True
    assert decision.reason == "Suspicious patterns detected"
    assert firewall.is_blocked("10.0.0.1")
    assert blocked_repo.rows["10.0.0.1"] == "suspicious_patterns"
    assert recording_log.names() == ["suspicious_request", "ip_blocked"]


def test_sql_keywords_in_query_are_detected(make_firewall):
    firewall = make_firewall()
    assert firewall.matches_suspicious_pattern("/api/services?id=1 UNION SELECT password")
    assert not firewall.matches_suspicious_pattern("/api/services?id=1")


def test_sixth_request_with_scanner_agent_is_rejected(make_firewall, recording_log):
    firewall = make_firewall()

    for _ in range(5):
        assert firewall.analyze(_info(user_agent="sqlmap/1.7")).blocked is False

    assert recording_log.count("suspicious_user_agent") == 5
    assert firewall.is_blocked("10.0.0.1")

    decision = firewall.analyze(_info(user_agent="sqlmap/1.7"))
    assert decision.blocked is True
    assert decision.reason == "IP blocked"


def test_blocked_country(make_firewall, recording_log):
    policy = GatePolicy(blocked_countries=["cn"])
    firewall = make_firewall(policy=policy, geo=StaticGeo("CN"))

    decision = firewall.analyze(_info())
    assert decision.blocked is True
    assert decision.reason == "Country blocked"
    assert "blocked_country" in recording_log.names()


def test_check_fails_open(make_firewall):
    policy = GatePolicy(blocked_countries=["CN"])
    firewall = make_firewall(policy=policy, geo=BrokenGeo())

    assert firewall.check(_info()) == ALLOW


def test_unblock_ip(make_firewall, recording_log, blocked_repo):
    firewall = make_firewall()
    firewall.block_ip("10.0.0.2", "manual")

    assert firewall.unblock_ip("10.0.0.2") is True
    assert not firewall.is_blocked("10.0.0.2")
    assert "10.0.0.2" not in blocked_repo.rows
    assert firewall.unblock_ip("10.0.0.2") is False
    assert recording_log.count("ip_unblocked") == 1


def test_load_blocked_from_repository(recording_log, blocked_repo):
    blocked_repo.rows.update({"10.1.1.1": "seed", "10.1.1.2": "seed"})
    firewall = Firewall(
        GatePolicy(),
        recording_log,
        blocked=BlockedIPSet(),
        suspicion=SuspicionCounter(),
        repo=blocked_repo,
    )

    assert firewall.load_blocked() == 2
    assert firewall.is_blocked("10.1.1.2")


def test_compile_patterns_skips_invalid_expressions():
    compiled = compile_patterns([r"(unclosed", r"javascript:"])
    assert len(compiled) == 1
    assert compiled[0].search("JAVASCRIPT:alert(1)")
