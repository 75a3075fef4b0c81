#!/usr/bin/env python3
"""Tests for SessionManager."""

import pytest

from garage import SessionManager


class TestSessionManager:
    """Tests for sign-in state and subscriptions."""

    def test_starts_signed_out(self):
        session = SessionManager()
        assert session.user_id is None
        assert not session.is_signed_in

    def test_initial_user(self):
        session = SessionManager("alice")
        assert session.user_id == "alice"
        assert session.is_signed_in

    def test_sign_in_notifies(self):
        session = SessionManager()
        seen = []
        session.subscribe(seen.append)

        session.sign_in("alice")

        assert session.user_id == "alice"
        assert seen == ["alice"]

    def test_sign_out_notifies_none(self):
        session = SessionManager("alice")
        seen = []
        session.subscribe(seen.append)

        session.sign_out()

        assert not session.is_signed_in
        assert seen == [None]

    def test_no_notification_when_unchanged(self):
        session = SessionManager("alice")
        seen = []
        session.subscribe(seen.append)

        session.sign_in("alice")
        session.sign_out()
        session.sign_out()

        assert seen == [None]

    def test_unsubscribe(self):
        session = SessionManager()
        seen = []
        unsubscribe = session.subscribe(seen.append)

        session.sign_in("alice")
        unsubscribe()
        session.sign_in("bob")

        assert seen == ["alice"]

    def test_unsubscribe_twice_is_harmless(self):
        session = SessionManager()
        unsubscribe = session.subscribe(lambda user_id: None)
        unsubscribe()
        unsubscribe()

    def test_listener_may_unsubscribe_during_notification(self):
        session = SessionManager()
        seen = []

        def once(user_id):
            seen.append(user_id)
            unsubscribe()

        unsubscribe = session.subscribe(once)
        session.subscribe(lambda user_id: seen.append(("second", user_id)))

        session.sign_in("alice")
        session.sign_in("bob")

        assert seen == ["alice", ("second", "alice"), ("second", "bob")]

    def test_rejects_empty_user(self):
        session = SessionManager()
        with pytest.raises(ValueError):
            session.sign_in("")

    def test_sessions_are_independent(self):
        first = SessionManager()
        second = SessionManager()
        first.sign_in("alice")
        assert second.user_id is None
