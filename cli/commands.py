"""Command handlers and argument parser for the skillz CLI.

Each handler opens the store for the duration of one command and returns
the process exit code.
"""

import argparse

from accounts import AccountFlows, AppConfig, open_store


def login_command(config: AppConfig, prompter) -> int:
    """Log in, or register when the username is unknown."""
    with open_store(config.db_path) as store:
        AccountFlows(store, prompter, config).login()
    return 0


def logout_command(config: AppConfig, prompter) -> int:
    with open_store(config.db_path) as store:
        AccountFlows(store, prompter, config).logout()
    return 0


def user_command(config: AppConfig, prompter) -> int:
    """Print the logged in account as JSON, without its password hash."""
    with open_store(config.db_path) as store:
        account = AccountFlows(store, prompter, config).current_user()
    prompter.show(account.to_json(indent=2))
    return 0


def update_password_command(config: AppConfig, prompter) -> int:
    with open_store(config.db_path) as store:
        AccountFlows(store, prompter, config).change_password()
    return 0


def build_parser() -> argparse.ArgumentParser:
    """Build the skillz parser.

    Commands:
        login
        logout
        user
        user update password
    """
    parser = argparse.ArgumentParser(
        prog="skillz",
        description="The Skillz CLI tool. Login to your account and manage your stats",
    )
    commands = parser.add_subparsers(dest="command", metavar="command")

    commands.add_parser(
        "login",
        help="Login using your username and password",
        description=(
            "Login using your username and password. "
            "If the provided username is not registered, you will be able to create an account"
        ),
    )
    commands.add_parser("logout", help="Logout of the current account")

    user = commands.add_parser(
        "user",
        help="Manage the currently logged in user",
        description="Show the currently logged in user, or change its settings",
    )
    user_commands = user.add_subparsers(dest="user_command", metavar="command")

    update = user_commands.add_parser(
        "update", help="Update account settings for the currently logged in user"
    )
    update_commands = update.add_subparsers(dest="update_command", metavar="setting")
    update_commands.add_parser("password", help="Update your password")

    return parser


def resolve_handler(args: argparse.Namespace):
    """Map parsed arguments to a handler.

    Returns:
        Handler callable, or None when only help should be printed
    """
    if args.command == "login":
        return login_command
    if args.command == "logout":
        return logout_command
    if args.command == "user":
        user_command_name = getattr(args, "user_command", None)
        if user_command_name is None:
            return user_command
        if getattr(args, "update_command", None) == "password":
            return update_password_command
    return None
