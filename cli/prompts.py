"""Terminal prompts used by the account flows.

Plain input, masked input and yes/no confirmation, each blocking until the
user answers. Ctrl-C or EOF aborts the command.
"""

import getpass

from accounts.errors import InputAbortError


class TerminalPrompter:
    """Prompter backed by input() and getpass()."""

    def _read(self, reader, prompt: str) -> str:
        try:
            return reader(prompt)
        except (EOFError, KeyboardInterrupt):
            print()
            raise InputAbortError("Prompt cancelled")

    def ask(self, label: str) -> str:
        """Prompt until a non-empty answer is given."""
        while True:
            value = self._read(input, f"{label}: ").strip()
            if value:
                return value
            print(f"{label} cannot be empty")

    def ask_secret(self, label: str) -> str:
        return self._read(getpass.getpass, f"{label}: ")

    def confirm(self, label: str) -> bool:
        response = self._read(input, f"{label}? (y/n): ").strip().lower()
        return response == 'y'

    def show(self, message: str) -> None:
        print(message)
