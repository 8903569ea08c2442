"""Per-request access decision for the dashboard.

Every request is classified before it reaches a view:

    Exempt    - path under the API prefix, or the login page itself
    Pass      - auth cookie matches the configured shared secret
    Redirect  - anything else, sent to the login page
"""
import hmac
from dataclasses import dataclass
from typing import Optional

AUTH_COOKIE = "eden-auth"
API_PREFIX = "/api/"
LOGIN_PATH = "/login"

PASS = "pass"
EXEMPT = "exempt"
REDIRECT = "redirect"


@dataclass(frozen=True)
class Decision:
    outcome: str
    target: Optional[str] = None

    @property
    def allowed(self):
        return self.outcome != REDIRECT


def secrets_match(secret, candidate):
    # Unset or empty secret never matches anything, an empty cookie included.
    if not secret or not isinstance(candidate, str):
        return False
    return hmac.compare_digest(secret.encode("utf-8"), candidate.encode("utf-8"))


class RequestGate:

    def __init__(self, secret, api_prefix=API_PREFIX, login_path=LOGIN_PATH):
        self.secret = secret
        self.api_prefix = api_prefix
        self.login_path = login_path

    def decide(self, path, cookie_value=None):
        if path.startswith(self.api_prefix):
            return Decision(EXEMPT)

        if path == self.login_path:
            return Decision(EXEMPT)

        if secrets_match(self.secret, cookie_value):
            return Decision(PASS)

        return Decision(REDIRECT, self.login_path)
