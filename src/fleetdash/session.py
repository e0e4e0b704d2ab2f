"""Session state machine for the dashboard.

A :class:`SessionManager` is created once per application and handed to
whatever needs it; there is no module-level instance.

Lifecycle:

* **init** – the state is hydrated from the credential store, synchronously
  and without a server round trip: ``AUTHENTICATED`` iff a credential is
  stored.
* **login** – the backend exchanges username/password for a token, the
  token is persisted and the state becomes ``AUTHENTICATED``.
* **logout** – the stored credential is removed and the state becomes
  ``UNAUTHENTICATED``. Purely local.

A stored credential is never revalidated or expired client-side; it stays
in effect until :meth:`SessionManager.logout`.
"""

from __future__ import annotations

import enum
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol

from fleetdash.credentials import CredentialStore
from fleetdash.models.token import AuthToken

_logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    UNAUTHENTICATED = "unauthenticated"
    AUTHENTICATED = "authenticated"


@dataclass(frozen=True, slots=True)
class Session:
    """Derived view of the session; never persisted on its own."""

    authenticated: bool


class Authenticator(Protocol):
    """The part of the gateway the session manager depends on."""

    async def login(self, username: str, password: str) -> AuthToken:
        ...


StateListener = Callable[[SessionState], None]


class SessionManager:
    """Own the ``{UNAUTHENTICATED, AUTHENTICATED}`` state machine.

    Parameters
    ----------
    store : CredentialStore
        Where the bearer credential lives. Only this class writes it.
    gateway : Authenticator
        Usually a :class:`fleetdash.client.FleetClient`.
    """

    def __init__(self, store: CredentialStore, gateway: Authenticator) -> None:
        self._store = store
        self._gateway = gateway
        self._listeners: list[StateListener] = []
        self._state = SessionState.AUTHENTICATED if store.get() else SessionState.UNAUTHENTICATED
        _logger.debug("Session hydrated state=%s", self._state.value)

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def is_authenticated(self) -> bool:
        return self._state is SessionState.AUTHENTICATED

    @property
    def session(self) -> Session:
        return Session(authenticated=self.is_authenticated)

    def add_listener(self, listener: StateListener) -> Callable[[], None]:
        """Register *listener* for state changes; returns an unsubscribe callable."""
        self._listeners.append(listener)

        def _remove() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _remove

    async def login(self, username: str, password: str) -> None:
        """Authenticate and persist the returned token.

        On any failure the state is left as it was and the classified error
        propagates to the caller.
        """
        token = await self._gateway.login(username, password)
        self._store.set(token.token)
        _logger.info("Login succeeded for user=%s", username)
        self._transition(SessionState.AUTHENTICATED)

    def logout(self) -> None:
        """Forget the stored credential. No network call is made.

        The state becomes ``UNAUTHENTICATED`` even if removing the credential
        from storage fails; that storage error is still raised.
        """
        try:
            self._store.clear()
        finally:
            self._transition(SessionState.UNAUTHENTICATED)
            _logger.info("Logged out")

    def _transition(self, new_state: SessionState) -> None:
        if new_state is self._state:
            return
        self._state = new_state
        for listener in list(self._listeners):
            try:
                listener(new_state)
            except Exception:
                _logger.warning("Session listener failed", exc_info=True)
