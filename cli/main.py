"""Entry point for the skillz command."""

import logging
import sys
from typing import Optional

from pydantic import ValidationError

from accounts import AccountError, AppConfig, StorageError, configure_logging, load_config
from cli.commands import build_parser, resolve_handler
from cli.prompts import TerminalPrompter

logger = logging.getLogger(__name__)


def main(argv: Optional[list[str]] = None, prompter=None, config: Optional[AppConfig] = None) -> int:
    """Run one skillz command.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
        prompter: Prompt provider (defaults to the terminal)
        config: Settings (defaults to load_config())

    Returns:
        Process exit code
    """
    parser = build_parser()
    args = parser.parse_args(argv)

    handler = resolve_handler(args)
    if handler is None:
        parser.print_help()
        return 0

    prompter = prompter or TerminalPrompter()

    try:
        config = config or load_config()
    except ValidationError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        configure_logging(config.log_dir, config.log_level)
    except OSError as e:
        print(f"Error when setting up logging in {config.log_dir}: {e}", file=sys.stderr)
        return 1

    try:
        return handler(config, prompter)
    except StorageError as e:
        logger.error("Storage failure: %s", e)
        print(f"Error when accessing database: {e}", file=sys.stderr)
        return 1
    except AccountError as e:
        logger.info("Command %s failed: %s", args.command, e)
        print(str(e), file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
