# core/session_gate.py
import hmac
import logging
from enum import Enum
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)


class View(str, Enum):
    HOME = "home"
    LOGIN = "login"
    ADMIN = "admin"


AuthListener = Callable[[bool], None]


class SessionGate:
    """Tracks whether an administrator is signed in.

    The gate only compares a presented key against the configured admin key;
    identity management lives with whoever issues that key.
    """

    def __init__(self, api_key: str):
        self._api_key = api_key
        self._authenticated = False
        self._listeners: List[AuthListener] = []

    def check_key(self, presented: Optional[str]) -> bool:
        """Constant-time comparison of a presented key with the admin key"""
        if not presented or not self._api_key:
            return False
        return hmac.compare_digest(presented.encode(), self._api_key.encode())

    def sign_in(self, presented: Optional[str]) -> bool:
        if not self.check_key(presented):
            logger.warning("Rejected admin sign-in with an invalid key")
            return False
        self._set_state(True)
        return True

    def sign_out(self) -> None:
        self._set_state(False)

    def is_authenticated(self) -> bool:
        return self._authenticated

    def on_auth_change(self, callback: AuthListener) -> Callable[[], None]:
        """Call callback(authenticated) whenever the state flips. Returns an unsubscribe function."""
        self._listeners.append(callback)

        def unsubscribe() -> None:
            if callback in self._listeners:
                self._listeners.remove(callback)

        return unsubscribe

    def current_view(self, requested: Optional[View] = None) -> View:
        """Route to the admin view when signed in, otherwise to login or home"""
        if self._authenticated:
            return View.ADMIN
        if requested == View.LOGIN:
            return View.LOGIN
        return View.HOME

    def authorizer(self) -> Callable[[], bool]:
        """Predicate for services that must only mutate on behalf of an admin"""
        return self.is_authenticated

    def _set_state(self, authenticated: bool) -> None:
        if authenticated == self._authenticated:
            return
        self._authenticated = authenticated
        logger.info(f"Admin session {'started' if authenticated else 'ended'}")
        for callback in list(self._listeners):
            try:
                callback(authenticated)
            except Exception:
                logger.exception("Auth change listener failed")
