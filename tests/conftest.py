import asyncio

import pytest

from quishguard.clients.base import BaseLookup
from quishguard.clients.transport import FollowResult, ProbeResult
from quishguard.exceptions import APIError


class FakeTransport:
    """Records calls; redirects and probe statuses are scripted per URL."""

    def __init__(self, redirects=None, statuses=None, fail_probe=False):
        self.redirects = redirects or {}
        self.statuses = statuses or {}
        self.fail_probe = fail_probe
        self.follow_calls = []
        self.probe_calls = []

    def follow(self, url, max_redirects=5, timeout=5.0):
        self.follow_calls.append(url)
        final_url, redirect_count = self.redirects.get(url, (url, 0))
        return FollowResult(final_url=final_url, status_code=200, redirect_count=redirect_count)

    def probe(self, url, timeout=5.0):
        self.probe_calls.append(url)
        if self.fail_probe:
            raise ConnectionError("certificate verify failed")
        return ProbeResult(status_code=self.statuses.get(url, 200))


class FakeLookup(BaseLookup):
    """Lookup returning a canned result, raising, or reporting unconfigured."""

    name = "Fake Lookup"

    def __init__(self, result=None, configured=True, error=None):
        self.result = result
        self.configured = configured
        self.error = error
        self.calls = []

    @property
    def is_configured(self):
        return self.configured

    def _query(self, target):
        self.calls.append(target)
        if self.error:
            raise APIError(self.error)
        return self.result


def run(coro):
    return asyncio.run(coro)


@pytest.fixture
def transport():
    return FakeTransport()
