"""Tests for the shared HTTP session."""

from __future__ import annotations

import responses

from resqnav.http import create_session


class TestCreateSession:
    def test_headers(self):
        session = create_session(user_agent="resqnav-test/1.0")
        assert session.headers["User-Agent"] == "resqnav-test/1.0"
        assert session.headers["Accept"] == "application/json"

    def test_retry_policy_mounted(self):
        adapter = create_session(retries=5).get_adapter("https://api.reliefweb.int/v2")
        assert adapter.max_retries.total == 5
        assert 503 in adapter.max_retries.status_forcelist

    @responses.activate
    def test_error_status_returned_not_raised(self):
        responses.add(responses.GET, "https://example.org/feed", status=404)
        resp = create_session(retries=0).get("https://example.org/feed")
        assert resp.status_code == 404
