"""Shared fixtures for account tests."""

import pytest

from accounts import AccountStore, AppConfig, MemoryEngine

VALID_PASSWORD = "abc___5def"
OTHER_PASSWORD = "xyz___7uvw"


class ScriptedPrompter:
    """Prompter that replays canned answers and records output.

    An exception instance in any script is raised instead of returned.
    """

    def __init__(self, answers=None, secrets=None, confirms=None):
        self.answers = list(answers or [])
        self.secrets = list(secrets or [])
        self.confirms = list(confirms or [])
        self.messages: list[str] = []

    def _next(self, script):
        value = script.pop(0)
        if isinstance(value, Exception):
            raise value
        return value

    def ask(self, label: str) -> str:
        return self._next(self.answers)

    def ask_secret(self, label: str) -> str:
        return self._next(self.secrets)

    def confirm(self, label: str) -> bool:
        return self._next(self.confirms)

    def show(self, message: str) -> None:
        self.messages.append(message)

    def output(self) -> str:
        return "\n".join(self.messages)


@pytest.fixture
def config(tmp_path):
    """Config with the cheapest bcrypt cost and paths under tmp_path."""
    return AppConfig(
        db_path=str(tmp_path / "users.db"),
        log_dir=str(tmp_path / "logs"),
        max_attempts=5,
        bcrypt_rounds=4,
    )


@pytest.fixture
def store():
    return AccountStore(MemoryEngine())
