from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import pytest
import requests

from quishguard.clients import safe_browsing, virustotal, whois_lookup
from quishguard.clients.safe_browsing import SafeBrowsingLookup
from quishguard.clients.transport import HttpTransport
from quishguard.clients.virustotal import DomainReputationInfo, VirusTotalLookup
from quishguard.clients.whois_lookup import WhoisLookup
from quishguard.exceptions import APIError, ConfigurationMissing


class FakeResponse:
    def __init__(self, payload=None, status_code=200, url=None, history=()):
        self.payload = payload or {}
        self.status_code = status_code
        self.url = url
        self.history = list(history)
        self.closed = False

    def json(self):
        return self.payload

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def close(self):
        self.closed = True


def test_unconfigured_lookups_raise_configuration_missing():
    with pytest.raises(ConfigurationMissing):
        SafeBrowsingLookup(api_key="").query("https://example.com")
    with pytest.raises(ConfigurationMissing):
        VirusTotalLookup(api_key="").query("example.com")
    with pytest.raises(ConfigurationMissing):
        WhoisLookup(enabled=False).query("example.com")


def test_safe_browsing_parses_matches(monkeypatch):
    captured = {}

    def fake_post(url, params=None, json=None, timeout=None):
        captured.update(params=params, json=json)
        return FakeResponse({"matches": [{
            "threatType": "SOCIAL_ENGINEERING",
            "platformType": "ANY_PLATFORM",
            "threat": {"url": "https://bad.example"}
        }]})

    monkeypatch.setattr(safe_browsing.requests, "post", fake_post)
    result = SafeBrowsingLookup(api_key="k").query("https://bad.example")

    assert result.matches == [{
        "type": "SOCIAL_ENGINEERING", "platform": "ANY_PLATFORM", "url": "https://bad.example"
    }]
    assert captured["params"] == {"key": "k"}
    assert captured["json"]["threatInfo"]["threatEntries"] == [{"url": "https://bad.example"}]


def test_safe_browsing_empty_response_has_no_matches(monkeypatch):
    monkeypatch.setattr(safe_browsing.requests, "post", lambda *a, **kw: FakeResponse({}))
    assert SafeBrowsingLookup(api_key="k").query("https://example.com").matches == []


def test_safe_browsing_http_error_is_api_error(monkeypatch):
    monkeypatch.setattr(safe_browsing.requests, "post", lambda *a, **kw: FakeResponse(status_code=403))
    with pytest.raises(APIError):
        SafeBrowsingLookup(api_key="k").query("https://example.com")


def test_virustotal_parses_stats(monkeypatch):
    payload = {"data": {"attributes": {
        "last_analysis_stats": {"malicious": 2, "suspicious": 1, "harmless": 60, "undetected": 7},
        "reputation": -12
    }}}
    monkeypatch.setattr(virustotal.requests, "get", lambda *a, **kw: FakeResponse(payload))

    info = VirusTotalLookup(api_key="k").query("paypa1.com")

    assert info.is_suspicious
    assert info.detection_ratio == "3/70"
    assert info.reputation == -12


def test_virustotal_clean_domain():
    info = DomainReputationInfo(malicious_count=0, suspicious_count=0, total_engines=70)
    assert not info.is_suspicious


@pytest.mark.parametrize("response", [FakeResponse(status_code=404), FakeResponse({"data": {}})])
def test_virustotal_bad_response_is_api_error(monkeypatch, response):
    monkeypatch.setattr(virustotal.requests, "get", lambda *a, **kw: response)
    with pytest.raises(APIError):
        VirusTotalLookup(api_key="k").query("example.com")


def test_virustotal_network_error_is_api_error(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("unreachable")

    monkeypatch.setattr(virustotal.requests, "get", fail)
    with pytest.raises(APIError):
        VirusTotalLookup(api_key="k").query("example.com")


def test_whois_age_from_first_creation_date(monkeypatch):
    created = datetime.now(timezone.utc).replace(tzinfo=None) - timedelta(days=10)
    record = SimpleNamespace(creation_date=[created, created - timedelta(days=400)], registrar="Registrar Inc")
    monkeypatch.setattr(whois_lookup.whois, "whois", lambda domain: record)

    info = WhoisLookup(enabled=True).query("new.example")

    assert info.registrar == "Registrar Inc"
    assert info.age_in_days == 10


def test_whois_missing_creation_date_is_api_error(monkeypatch):
    record = SimpleNamespace(creation_date=None, registrar=None)
    monkeypatch.setattr(whois_lookup.whois, "whois", lambda domain: record)

    with pytest.raises(APIError):
        WhoisLookup(enabled=True).query("example.com")


def test_transport_follow_counts_redirects():
    class FakeSession:
        max_redirects = 30

        def get(self, url, **kwargs):
            self.kwargs = kwargs
            self.response = FakeResponse(url="https://final.example/", history=[object(), object()])
            return self.response

    session = FakeSession()
    result = HttpTransport(session=session, user_agent="test-agent").follow("https://bit.ly/x", max_redirects=4)

    assert result.final_url == "https://final.example/"
    assert result.redirect_count == 2
    assert session.max_redirects == 4
    assert session.kwargs["headers"] == {"User-Agent": "test-agent"}
    assert session.response.closed
