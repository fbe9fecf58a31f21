"""Login, registration, logout and password change flows.

Flows combine the store, policy and hasher with an interactive prompter.
The prompter is any object providing:

    ask(label) -> str            plain, non-empty input
    ask_secret(label) -> str     masked input
    confirm(label) -> bool       yes/no question
    show(message) -> None        informational output

Every retry loop is bounded by config.max_attempts and reports the remaining
attempts before reprompting.
"""

import logging
from typing import Optional

from accounts.config import AppConfig
from accounts.errors import AccountExistsError, AttemptsExhaustedError, NoActiveSessionError
from accounts.events import log_account_event
from accounts.hasher import hash_password, verify_password
from accounts.models import Account
from accounts.policy import check_password, describe_policy
from accounts.storage import AccountStore

logger = logging.getLogger(__name__)


class AccountFlows:
    """Use cases behind the login, logout and user commands."""

    def __init__(self, store: AccountStore, prompter, config: AppConfig):
        self.store = store
        self.prompter = prompter
        self.config = config

    def login(self) -> Optional[Account]:
        """Log in, offering to register unknown usernames.

        Returns:
            The logged in account, or None if account creation was declined

        Raises:
            AttemptsExhaustedError: Password attempts ran out
            AccountExistsError: Replacement username is already registered
        """
        username = self.prompter.ask("Username")
        account = self.store.get(username)

        if account is None:
            self.prompter.show("Username not found")
            if not self.prompter.confirm("Create a new account"):
                logger.info("Account creation declined for %s", username)
                return None

            if not self.prompter.confirm(f"Use provided username, ({username})"):
                username = self.prompter.ask("Username")
                if self.store.get(username) is not None:
                    raise AccountExistsError(f"Username {username} is already registered")

            account = self.register(username)
        else:
            self.authenticate(account, event_type="login")

        self.store.set_current_session(account)
        log_account_event("login", "SUCCESS", account.username)
        self.prompter.show("successfully logged in")
        return account

    def authenticate(self, account: Account, event_type: str = "login") -> None:
        """Prompt for the current password until it matches.

        Raises:
            AttemptsExhaustedError: After config.max_attempts wrong passwords
        """
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            password = self.prompter.ask_secret("Current password")
            if verify_password(account.hashed_password, password):
                logger.info("Authenticated %s", account.username)
                return

            remaining = max_attempts - attempt
            log_account_event(event_type, "FAILURE", account.username, {"remaining": remaining})
            self.prompter.show(f"Incorrect password provided. Attempts left: {remaining}")

        log_account_event(event_type, "LOCKOUT", account.username)
        logger.warning("Attempts exhausted for %s", account.username)
        raise AttemptsExhaustedError()

    def collect_new_password(self) -> str:
        """Prompt for a new password that passes policy and is confirmed.

        Policy violations and confirmation mismatches both use up an attempt.

        Raises:
            AttemptsExhaustedError: If no acceptable password was entered in time
        """
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            remaining = max_attempts - attempt
            candidate = self.prompter.ask_secret("Password")

            violation = check_password(candidate, self.config.policy)
            if violation is not None:
                self.prompter.show(f"Invalid password: {violation}. Attempts left: {remaining}")
                continue

            confirmation = self.prompter.ask_secret("Confirm password")
            if confirmation != candidate:
                self.prompter.show(f"Passwords do not match. Attempts left: {remaining}")
                continue

            return candidate

        raise AttemptsExhaustedError()

    def register(self, username: str) -> Account:
        """Create and persist a new account for username."""
        self.prompter.show(describe_policy(self.config.policy))
        password = self.collect_new_password()

        account = Account(
            username=username,
            hashed_password=hash_password(password, rounds=self.config.bcrypt_rounds),
        )
        self.store.put(username, account)

        log_account_event("register", "SUCCESS", username)
        self.prompter.show(f"User {username} created")
        return account

    def logout(self) -> Optional[str]:
        """Clear the session marker.

        The account record is never loaded, so a damaged record cannot keep
        its user logged in.

        Returns:
            Username that was logged in, or None if nobody was
        """
        username = self.store.get_current_username()
        self.store.clear_current_session()

        if username is None:
            self.prompter.show("No user currently logged in")
            return None

        log_account_event("logout", "SUCCESS", username)
        self.prompter.show(f"{username} successfully logged out")
        return username

    def current_user(self) -> Account:
        """Return the logged in account with its hash removed.

        Raises:
            NoActiveSessionError: If nobody is logged in
        """
        account = self.store.get_current_session()
        if account is None:
            raise NoActiveSessionError()
        return account.redacted()

    def change_password(self) -> Account:
        """Re-authenticate the current user and replace their password.

        Only the hash changes; username and creation time are kept.

        Raises:
            NoActiveSessionError: If nobody is logged in
            AttemptsExhaustedError: Re-authentication or new password attempts ran out
        """
        account = self.store.get_current_session()
        if account is None:
            raise NoActiveSessionError()

        self.authenticate(account, event_type="password_change")

        self.prompter.show(describe_policy(self.config.policy))
        new_password = self.collect_new_password()

        updated = account.model_copy(
            update={"hashed_password": hash_password(new_password, rounds=self.config.bcrypt_rounds)}
        )
        self.store.put(account.username, updated)

        log_account_event("password_change", "SUCCESS", account.username)
        self.prompter.show(f"Password updated for {account.username}")
        return updated
