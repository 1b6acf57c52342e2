import base64
import json
from collections import namedtuple

import pytest

from unifi_api_client import UnifiClient
from unifi_api_client.transport import TransportResponse

BASE_URL = "https://unifi.example.com:8443"
LEGACY_COOKIE = "unifises=abc123"
CSRF_TOKEN = "6f1c2a3e-csrf"

Call = namedtuple("Call", "method url headers body")


def make_jwt(payload):
    def segment(obj):
        return base64.urlsafe_b64encode(json.dumps(obj).encode()).decode().rstrip("=")

    return f"{segment({'alg': 'HS256', 'typ': 'JWT'})}.{segment(payload)}.c2lnbmF0dXJl"


UNIFI_OS_COOKIE = "TOKEN=" + make_jwt({"userId": "u1", "csrfToken": CSRF_TOKEN})


def envelope(data=None, rc="ok", msg=None):
    meta = {"rc": rc}
    if msg is not None:
        meta["msg"] = msg
    body = {"meta": meta}
    if data is not None:
        body["data"] = data
    return json.dumps(body)


def response(status=200, body="", set_cookies=None):
    return TransportResponse(status_code=status, text=body, set_cookies=list(set_cookies or []))


def legacy_login_responses(cookie=LEGACY_COOKIE, probe=True):
    login = response(200, envelope([]), [f"{cookie}; Path=/; Secure; HttpOnly", "csrf_token=xyz; Path=/"])
    return [response(302), login] if probe else [login]


def unifi_os_login_responses(cookie=UNIFI_OS_COOKIE, probe=True):
    login = response(200, json.dumps({"username": "admin"}), [f"{cookie}; path=/; samesite=strict; secure; httponly"])
    return [response(200, "<html></html>"), login] if probe else [login]


class FakeTransport:
    """Transport stand-in that records requests and replays queued responses."""

    def __init__(self, responses=None):
        self.responses = list(responses or [])
        self.calls = []
        self.connect_timeout = 10
        self.request_timeout = 30
        self.closed = False

    def queue(self, *responses):
        self.responses.extend(responses)

    def send(self, method, url, headers=None, body=None):
        self.calls.append(Call(method, url, dict(headers or {}), body))
        if not self.responses:
            raise AssertionError(f"Unexpected request: {method} {url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def close(self):
        self.closed = True

    def calls_to(self, suffix):
        return [call for call in self.calls if call.url.endswith(suffix)]


@pytest.fixture
def transport():
    return FakeTransport()


@pytest.fixture
def client(transport):
    return UnifiClient("admin", "secret", BASE_URL, transport=transport)


@pytest.fixture
def legacy_client(client, transport):
    transport.queue(*legacy_login_responses())
    assert client.login().ok
    transport.calls.clear()
    return client


@pytest.fixture
def unifi_os_client(client, transport):
    transport.queue(*unifi_os_login_responses())
    assert client.login().ok
    transport.calls.clear()
    return client
