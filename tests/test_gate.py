import pytest

from status_dashboard.gate import EXEMPT, PASS, REDIRECT, RequestGate, secrets_match

SECRET = "hunter2"


@pytest.fixture
def gate():
    return RequestGate(SECRET)


class TestExemptPaths:
    @pytest.mark.parametrize("path", ["/api/status", "/api/auth", "/api/", "/api/anything/deeper"])
    @pytest.mark.parametrize("cookie", [None, "", "wrong", SECRET])
    def test_api_prefix_always_exempt(self, gate, path, cookie):
        assert gate.decide(path, cookie).outcome == EXEMPT

    @pytest.mark.parametrize("cookie", [None, "", "wrong", SECRET])
    def test_login_always_exempt(self, gate, cookie):
        assert gate.decide("/login", cookie).outcome == EXEMPT

    def test_login_prefix_is_not_exempt(self, gate):
        assert gate.decide("/login/extra").outcome == REDIRECT
        assert gate.decide("/loginx").outcome == REDIRECT

    def test_api_without_trailing_slash_is_not_exempt(self, gate):
        assert gate.decide("/api").outcome == REDIRECT


class TestCredentialCheck:
    def test_matching_cookie_passes(self, gate):
        decision = gate.decide("/", SECRET)
        assert decision.outcome == PASS
        assert decision.allowed

    @pytest.mark.parametrize("cookie", [None, "", "HUNTER2", " hunter2", "hunter2 ", "hunter"])
    def test_anything_else_redirects_to_login(self, gate, cookie):
        decision = gate.decide("/dashboard", cookie)
        assert decision.outcome == REDIRECT
        assert decision.target == "/login"
        assert not decision.allowed

    @pytest.mark.parametrize("secret", [None, ""])
    @pytest.mark.parametrize("cookie", [None, "", "anything"])
    def test_unset_secret_fails_closed(self, secret, cookie):
        gate = RequestGate(secret)
        assert gate.decide("/", cookie).outcome == REDIRECT

    def test_custom_paths(self):
        gate = RequestGate(SECRET, api_prefix="/v1/", login_path="/signin")
        assert gate.decide("/v1/status").outcome == EXEMPT
        assert gate.decide("/signin").outcome == EXEMPT
        assert gate.decide("/api/status").target == "/signin"


def test_secrets_match_handles_non_ascii():
    assert secrets_match("päss", "päss")
    assert not secrets_match("päss", "pass")


def test_secrets_match_rejects_non_strings():
    assert not secrets_match(SECRET, 12345)
    assert not secrets_match(SECRET, None)
