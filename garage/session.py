"""Session manager with explicit sign-in subscriptions."""

import logging
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

Listener = Callable[[Optional[str]], None]


class SessionManager:
    """
    Tracks the signed-in user and notifies subscribers when it changes.

    Each subscriber is called with the new user id, or None after sign-out.
    """

    def __init__(self, user_id: Optional[str] = None):
        self._user_id = user_id
        self._listeners: List[Listener] = []

    @property
    def user_id(self) -> Optional[str]:
        return self._user_id

    @property
    def is_signed_in(self) -> bool:
        return self._user_id is not None

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register a listener; returns a function that removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def sign_in(self, user_id: str) -> None:
        if not user_id:
            raise ValueError("user_id must not be empty")
        self._set_user(user_id)

    def sign_out(self) -> None:
        self._set_user(None)

    def _set_user(self, user_id: Optional[str]) -> None:
        if user_id == self._user_id:
            return
        logger.info("Session user changed: %s -> %s", self._user_id, user_id)
        self._user_id = user_id
        # Copy so listeners may unsubscribe while being notified
        for listener in list(self._listeners):
            listener(user_id)
