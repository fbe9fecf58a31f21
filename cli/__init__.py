"""CLI package for the skillz account manager.

Provides argument parsing, terminal prompts and command handlers.
"""

from cli.commands import (
    build_parser,
    login_command,
    logout_command,
    user_command,
    update_password_command,
)
from cli.prompts import TerminalPrompter

__all__ = [
    "build_parser",
    "login_command",
    "logout_command",
    "user_command",
    "update_password_command",
    "TerminalPrompter",
]
