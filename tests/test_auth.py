import json

from unifi_api_client import MemorySessionStore, UnifiClient
from unifi_api_client.auth import parse_session_cookie
from unifi_api_client.exceptions import UnifiConnectionError
from unifi_api_client.result import ErrorKind

from .conftest import (
    BASE_URL,
    CSRF_TOKEN,
    LEGACY_COOKIE,
    UNIFI_OS_COOKIE,
    legacy_login_responses,
    response,
    unifi_os_login_responses,
)


class TestParseSessionCookie:
    def test_legacy_cookie(self):
        lines = ["unifises=abc123; Path=/; Secure; HttpOnly", "csrf_token=xyz; Path=/"]
        assert parse_session_cookie(lines) == ("unifises=abc123", False)

    def test_unifi_os_token(self):
        lines = [f"{UNIFI_OS_COOKIE}; path=/; samesite=strict; secure; httponly"]
        assert parse_session_cookie(lines) == (UNIFI_OS_COOKIE, True)

    def test_no_recognized_cookie(self):
        assert parse_session_cookie(["JSESSIONID=1; Path=/"]) is None
        assert parse_session_cookie([]) is None


class TestLogin:
    def test_legacy_login(self, client, transport):
        transport.queue(*legacy_login_responses())

        result = client.login()

        assert result.ok
        assert client.is_logged_in
        assert not client.get_is_unifi_os()
        assert client.get_cookies() == LEGACY_COOKIE

        probe, login = transport.calls
        assert (probe.method, probe.url, probe.body) == ("POST", f"{BASE_URL}/", None)
        assert (login.method, login.url) == ("POST", f"{BASE_URL}/api/login")
        assert login.headers["Content-Type"] == "application/json; charset=utf-8"
        assert json.loads(login.body) == {"username": "admin", "password": "secret"}

    def test_unifi_os_login(self, client, transport):
        transport.queue(*unifi_os_login_responses())

        assert client.login().ok
        assert client.get_is_unifi_os()
        assert client.get_cookies() == UNIFI_OS_COOKIE
        assert transport.calls[1].url == f"{BASE_URL}/api/auth/login"

    def test_login_is_idempotent(self, legacy_client, transport):
        assert legacy_client.login().ok
        assert transport.calls == []

    def test_rejected_credentials(self, client, transport):
        transport.queue(response(302), response(400, '{"meta":{"rc":"error","msg":"api.err.Invalid"}}'))

        result = client.login()

        assert result.error is ErrorKind.LOGIN_FAILED
        assert result.status_code == 400
        assert not client.is_logged_in
        assert len(transport.calls) == 2

    def test_success_status_without_session_cookie(self, client, transport):
        transport.queue(response(302), response(200, "{}", ["JSESSIONID=1; Path=/"]))

        result = client.login()

        assert result.error is ErrorKind.LOGIN_FAILED
        assert result.status_code == 200
        assert not client.is_logged_in

    def test_empty_login_body_is_rejected(self, client, transport):
        transport.queue(response(302), response(200, "", ["unifises=abc123; Path=/"]))

        result = client.login()

        assert result.error is ErrorKind.LOGIN_FAILED
        assert not client.is_logged_in
        assert client.get_cookies() == ""

    def test_probe_connection_failure(self, client, transport):
        transport.queue(UnifiConnectionError("connection refused"))

        result = client.login()

        assert result.error is ErrorKind.CONNECTION_ERROR
        assert "connection refused" in result.message
        assert len(transport.calls) == 1
        assert not client.is_logged_in

    def test_login_saves_cookie_to_store(self, transport):
        store = MemorySessionStore()
        client = UnifiClient("admin", "secret", BASE_URL, session_store=store, transport=transport)
        transport.queue(*legacy_login_responses())

        assert client.login().ok
        assert store.load("unificookie") == LEGACY_COOKIE

    def test_login_reuses_stored_cookie(self, transport):
        store = MemorySessionStore()
        store.save("portal", UNIFI_OS_COOKIE)
        client = UnifiClient(
            "admin", "secret", BASE_URL, session_key="portal", session_store=store, transport=transport
        )

        assert client.login().ok
        assert client.is_logged_in
        assert client.get_is_unifi_os()
        assert transport.calls == []


class TestLogout:
    def test_legacy_logout(self, legacy_client, transport):
        transport.queue(response(200))

        assert legacy_client.logout().ok

        call = transport.calls[0]
        assert (call.method, call.url, call.body) == ("POST", f"{BASE_URL}/logout", "")
        assert call.headers["Cookie"] == LEGACY_COOKIE
        assert "x-csrf-token" not in call.headers
        assert not legacy_client.is_logged_in
        assert legacy_client.get_cookies() == ""

    def test_unifi_os_logout_sends_csrf_token(self, unifi_os_client, transport):
        transport.queue(response(200))

        assert unifi_os_client.logout().ok

        call = transport.calls[0]
        assert call.url == f"{BASE_URL}/api/auth/logout"
        assert call.headers["x-csrf-token"] == CSRF_TOKEN

    def test_logout_clears_state_when_request_fails(self, transport):
        store = MemorySessionStore()
        client = UnifiClient("admin", "secret", BASE_URL, session_store=store, transport=transport)
        transport.queue(*legacy_login_responses())
        client.login()
        transport.queue(UnifiConnectionError("timed out"))

        result = client.logout()

        assert result.error is ErrorKind.CONNECTION_ERROR
        assert not client.is_logged_in
        assert store.load("unificookie") is None

    def test_logout_ignores_server_status(self, legacy_client, transport):
        transport.queue(response(500))

        assert legacy_client.logout().ok
        assert not legacy_client.is_logged_in
