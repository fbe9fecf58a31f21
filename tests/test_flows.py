"""Tests for login, registration, logout and password change flows."""

import pytest

from accounts import (
    Account,
    AccountExistsError,
    AccountFlows,
    AttemptsExhaustedError,
    NoActiveSessionError,
    hash_password,
    verify_password,
)
from accounts.config import USERS_BUCKET

from conftest import OTHER_PASSWORD, VALID_PASSWORD, ScriptedPrompter


def make_flows(store, config, **script):
    prompter = ScriptedPrompter(**script)
    return AccountFlows(store, prompter, config), prompter


@pytest.fixture
def alice(store):
    account = Account(username="alice", hashed_password=hash_password(VALID_PASSWORD, rounds=4))
    store.put("alice", account)
    return account


class TestRegistration:
    """Unknown usernames can register from the login command."""

    def test_register_and_login(self, store, config):
        """A new account is created, persisted and logged in."""
        flows, prompter = make_flows(
            store, config,
            answers=["alice"],
            confirms=[True, True],
            secrets=[VALID_PASSWORD, VALID_PASSWORD],
        )
        account = flows.login()

        assert account.username == "alice"
        assert verify_password(store.get("alice").hashed_password, VALID_PASSWORD)
        assert store.get_current_session().username == "alice"
        assert "Username not found" in prompter.messages
        assert "User alice created" in prompter.messages
        assert any(m.startswith("Password restrictions:") for m in prompter.messages)

    def test_register_then_login_again(self, store, config):
        flows, _ = make_flows(
            store, config,
            answers=["alice"],
            confirms=[True, True],
            secrets=[VALID_PASSWORD, VALID_PASSWORD],
        )
        flows.login()

        flows, _ = make_flows(store, config, answers=["alice"], secrets=[VALID_PASSWORD])
        assert flows.login().username == "alice"

    def test_declined_creation(self, store, config):
        """Declining leaves no account and no session."""
        flows, _ = make_flows(store, config, answers=["alice"], confirms=[False])
        assert flows.login() is None
        assert store.get("alice") is None
        assert store.get_current_session() is None

    def test_choose_other_username(self, store, config):
        flows, _ = make_flows(
            store, config,
            answers=["alice", "bob"],
            confirms=[True, False],
            secrets=[VALID_PASSWORD, VALID_PASSWORD],
        )
        account = flows.login()
        assert account.username == "bob"
        assert store.get("alice") is None
        assert store.get("bob") is not None

    def test_other_username_already_taken(self, store, config, alice):
        flows, _ = make_flows(store, config, answers=["carol", "alice"], confirms=[True, False])
        with pytest.raises(AccountExistsError):
            flows.login()

    def test_violation_reprompts_with_remaining_attempts(self, store, config):
        flows, prompter = make_flows(
            store, config,
            secrets=["short", VALID_PASSWORD, VALID_PASSWORD],
        )
        assert flows.collect_new_password() == VALID_PASSWORD
        assert (
            "Invalid password: Password must be 10 characters or more. Provided 5. Attempts left: 4"
            in prompter.messages
        )

    def test_confirmation_mismatch_uses_attempt(self, store, config):
        flows, prompter = make_flows(
            store, config,
            secrets=[VALID_PASSWORD, OTHER_PASSWORD, VALID_PASSWORD, VALID_PASSWORD],
        )
        assert flows.collect_new_password() == VALID_PASSWORD
        assert "Passwords do not match. Attempts left: 4" in prompter.messages

    def test_exhausted_registration_persists_nothing(self, store, config):
        flows, prompter = make_flows(
            store, config,
            answers=["alice"],
            confirms=[True, True],
            secrets=["abc___9def*"] * 5,
        )
        with pytest.raises(AttemptsExhaustedError):
            flows.login()

        assert store.get("alice") is None
        assert store.get_current_session() is None
        assert "Invalid password: Password contains invalid character: *. Attempts left: 0" in prompter.messages


class TestLogin:
    """Existing accounts authenticate with a bounded retry loop."""

    def test_correct_password(self, store, config, alice):
        flows, prompter = make_flows(store, config, answers=["alice"], secrets=[VALID_PASSWORD])
        assert flows.login() == alice
        assert store.get_current_session() == alice
        assert "successfully logged in" in prompter.messages

    def test_retry_then_success(self, store, config, alice):
        flows, prompter = make_flows(
            store, config, answers=["alice"], secrets=["wrong", VALID_PASSWORD]
        )
        flows.login()
        assert "Incorrect password provided. Attempts left: 4" in prompter.messages
        assert store.get_current_session() == alice

    def test_lockout(self, store, config, alice):
        """Five wrong passwords exhaust the budget without a session."""
        flows, prompter = make_flows(store, config, answers=["alice"], secrets=["wrong"] * 5)
        with pytest.raises(AttemptsExhaustedError):
            flows.login()

        assert store.get_current_session() is None
        remaining = [m for m in prompter.messages if m.startswith("Incorrect password")]
        assert remaining[-1].endswith("Attempts left: 0")
        assert len(remaining) == 5

    def test_custom_attempt_budget(self, store, config, alice):
        config = config.model_copy(update={"max_attempts": 2})
        flows, prompter = make_flows(store, config, answers=["alice"], secrets=["wrong"] * 2)
        with pytest.raises(AttemptsExhaustedError):
            flows.login()
        assert prompter.secrets == []

    def test_relogin_overwrites_session(self, store, config, alice):
        bob = Account(username="bob", hashed_password=hash_password(OTHER_PASSWORD, rounds=4))
        store.put("bob", bob)
        store.set_current_session(alice)

        flows, _ = make_flows(store, config, answers=["bob"], secrets=[OTHER_PASSWORD])
        flows.login()
        assert store.get_current_session().username == "bob"


class TestLogout:
    """Logout clears the session marker."""

    def test_logout_without_session(self, store, config):
        """No active session is a no-op, not an error."""
        flows, prompter = make_flows(store, config)
        assert flows.logout() is None
        assert "No user currently logged in" in prompter.messages

    def test_logout_with_corrupt_record(self, store, config, alice):
        """A damaged account record does not block logout."""
        store.set_current_session(alice)
        store.engine.put(USERS_BUCKET, "alice", b"not json")

        flows, _ = make_flows(store, config)
        assert flows.logout() == "alice"
        assert store.get_current_username() is None

    def test_logout_reports_username(self, store, config, alice):
        store.set_current_session(alice)
        flows, prompter = make_flows(store, config)
        assert flows.logout() == "alice"
        assert store.get_current_session() is None
        assert "alice successfully logged out" in prompter.messages


class TestCurrentUser:

    def test_redacted(self, store, config, alice):
        store.set_current_session(alice)
        flows, _ = make_flows(store, config)
        account = flows.current_user()
        assert account.username == "alice"
        assert account.hashed_password is None

    def test_no_session(self, store, config):
        flows, _ = make_flows(store, config)
        with pytest.raises(NoActiveSessionError):
            flows.current_user()


class TestChangePassword:
    """Password change re-authenticates and only replaces the hash."""

    def test_change(self, store, config, alice):
        store.set_current_session(alice)
        flows, prompter = make_flows(
            store, config, secrets=[VALID_PASSWORD, OTHER_PASSWORD, OTHER_PASSWORD]
        )
        updated = flows.change_password()

        stored = store.get("alice")
        assert stored == updated
        assert stored.created == alice.created
        assert verify_password(stored.hashed_password, OTHER_PASSWORD)
        assert not verify_password(stored.hashed_password, VALID_PASSWORD)
        assert "Password updated for alice" in prompter.messages

    def test_requires_session(self, store, config, alice):
        flows, _ = make_flows(store, config)
        with pytest.raises(NoActiveSessionError):
            flows.change_password()

    def test_failed_reauth_keeps_hash(self, store, config, alice):
        store.set_current_session(alice)
        flows, _ = make_flows(store, config, secrets=["wrong"] * 5)
        with pytest.raises(AttemptsExhaustedError):
            flows.change_password()
        assert store.get("alice").hashed_password == alice.hashed_password

    def test_invalid_new_password_keeps_hash(self, store, config, alice):
        store.set_current_session(alice)
        flows, _ = make_flows(store, config, secrets=[VALID_PASSWORD] + ["abc__5defgh"] * 5)
        with pytest.raises(AttemptsExhaustedError):
            flows.change_password()
        assert store.get("alice").hashed_password == alice.hashed_password
