from datetime import timedelta

from sitegate.repository.Security_event_repository import SecurityEventRepo
from sitegate.services.event_log import EventLog, severity_for
from sitegate.utils.timeutils import utc_now


def test_severity_classification():
    assert severity_for("suspicious_request") == "high"
    assert severity_for("blocked_country") == "high"
    assert severity_for("rate_limit_exceeded") == "medium"
    assert severity_for("potential_scraping") == "medium"
    assert severity_for("invalid_token") == "medium"
    assert severity_for("auth_failed") == "low"
    assert severity_for("page_view") == "low"
    assert severity_for("anything_else") == "low"


def test_log_records_event_with_severity(db):
    log = EventLog(max_entries=10)
    entry = log.log("suspicious_request", {"ip": "10.0.0.1"})

    assert entry is not None
    assert entry.severity == "high"
    recent = log.recent(5)
    assert recent[0]["event"] == "suspicious_request"
    assert recent[0]["data"] == {"ip": "10.0.0.1"}
    assert recent[0]["timestamp"].endswith("Z")


def test_log_never_exceeds_max_entries(db):
    log = EventLog(max_entries=5)
    for index in range(12):
        log.log("page_view", {"n": index})

    assert log.total() == 5
    exported = log.export()
    assert [item["data"]["n"] for item in exported] == [7, 8, 9, 10, 11]


def test_recent_is_newest_first(db):
    log = EventLog(max_entries=10)
    for name in ("a_event", "b_event", "c_event"):
        log.log(name)

    assert [item["event"] for item in log.recent(2)] == ["c_event", "b_event"]


def test_counts_and_analytics(db):
    log = EventLog(max_entries=100)
    for _ in range(3):
        log.log("page_view")
    log.log("contact_form_submit", {"contactId": 1})
    log.log("auth_success", {"username": "admin"})
    log.log("auth_failed", {"reason": "invalid_password"})

    analytics = log.analytics()
    assert analytics["totalVisits"] == 3
    assert analytics["totalContacts"] == 1
    assert analytics["adminLogins"] == 1
    assert analytics["recentActivity"][0]["event"] == "auth_failed"
    assert log.count_last(timedelta(hours=24)) == 6


def test_count_last_ignores_old_events(db):
    repo = SecurityEventRepo()
    repo.append("page_view", {}, "low", max_entries=100, timestamp=utc_now() - timedelta(days=2))
    log = EventLog(max_entries=100, repo=repo)
    log.log("page_view")

    assert log.total() == 2
    assert log.count_last(timedelta(hours=24)) == 1


class ExplodingRepo:
    def append(self, *args, **kwargs):
        raise RuntimeError("disk full")


def test_log_failures_are_swallowed():
    log = EventLog(max_entries=10, repo=ExplodingRepo())
    assert log.log("page_view", {"ip": "10.0.0.1"}) is None
