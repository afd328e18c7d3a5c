"""Unit tests for the Pi-hole API client."""

import pytest
import requests
from unittest.mock import MagicMock, patch

from exceptions import UpstreamError
from pihole_client import PiholeClient


def make_response(status_code=200, json_data=None, text=""):
    response = MagicMock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 300
    response.text = text
    if json_data is None:
        response.json.side_effect = ValueError("No JSON")
    else:
        response.json.return_value = json_data
    return response


@pytest.fixture
def client():
    return PiholeClient("https://pi.hole/api/", request_timeout=5)


class TestSession:
    def test_certificate_validation_disabled(self, client):
        assert client.session.verify is False

    def test_trailing_slash_stripped(self, client):
        assert client.base_url == "https://pi.hole/api"


class TestDenyRegexRules:
    def test_get_rules(self, client, upstream_domains):
        with patch.object(client.session, "request", return_value=make_response(json_data=upstream_domains)) as request:
            rules = client.get_deny_regex_rules()

        request.assert_called_once_with(
            "GET", "https://pi.hole/api/domains/deny/regex", json=None, timeout=5
        )
        assert [rule.id for rule in rules] == [1, 2, 7]
        assert rules[0].comment == "c"

    def test_unexpected_format(self, client):
        with patch.object(client.session, "request", return_value=make_response(json_data={"took": 0.1})):
            with pytest.raises(UpstreamError) as exc_info:
                client.get_deny_regex_rules()

        assert exc_info.value.status_code is None

    def test_update_encodes_pattern_as_one_segment(self, client):
        reply = {"processed": {"success": [{"item": "(^|\\.)tiktok\\.com$"}], "errors": []}}
        with patch.object(client.session, "request", return_value=make_response(json_data=reply)) as request:
            result = client.update_deny_regex_rule("(^|\\.)tiktok\\.com$", False, "TikTok")

        method, url = request.call_args.args
        assert method == "PUT"
        assert url == "https://pi.hole/api/domains/deny/regex/%28%5E%7C%5C.%29tiktok%5C.com%24"
        assert request.call_args.kwargs["json"] == {"enabled": False, "comment": "TikTok"}
        assert result == reply

    def test_update_encodes_slashes(self, client):
        with patch.object(client.session, "request", return_value=make_response(json_data={})) as request:
            client.update_deny_regex_rule("a/b", True, None)

        assert request.call_args.args[1].endswith("/domains/deny/regex/a%2Fb")


class TestBlocking:
    def test_get_blocking_returns_raw_body(self, client):
        body = {"blocking": "disabled", "timer": 250.5, "took": 0.0001}
        with patch.object(client.session, "request", return_value=make_response(json_data=body)):
            assert client.get_blocking() == body

    def test_set_blocking_payload(self, client):
        with patch.object(client.session, "request", return_value=make_response(json_data={})) as request:
            client.set_blocking(False, 300)

        assert request.call_args.args == ("POST", "https://pi.hole/api/dns/blocking")
        assert request.call_args.kwargs["json"] == {"blocking": False, "timer": 300}

    def test_non_json_body_returned_as_text(self, client):
        with patch.object(client.session, "request", return_value=make_response(text="OK")):
            assert client.set_blocking(True, 0) == "OK"


class TestErrors:
    def test_http_error_carries_status(self, client):
        with patch.object(client.session, "request", return_value=make_response(status_code=401, text="unauthorized")):
            with pytest.raises(UpstreamError) as exc_info:
                client.get_blocking()

        assert exc_info.value.status_code == 401
        assert "401" in str(exc_info.value)

    def test_network_error_has_no_status(self, client):
        with patch.object(client.session, "request", side_effect=requests.ConnectionError("refused")):
            with pytest.raises(UpstreamError) as exc_info:
                client.get_client_info()

        assert exc_info.value.status_code is None
        assert "refused" in str(exc_info.value)

    def test_no_retry_on_failure(self, client):
        with patch.object(client.session, "request", side_effect=requests.Timeout("slow")) as request:
            with pytest.raises(UpstreamError):
                client.get_deny_regex_rules()

        assert request.call_count == 1
