"""Exceptions raised by account operations.

Storage failures live in accounts.storage alongside the engines.
"""


class AccountError(Exception):
    """Base exception for command-level account failures."""
    pass


class PolicyViolation(AccountError):
    """Candidate password breaks a policy rule."""
    pass


class TooShort(PolicyViolation):
    def __init__(self, length: int, minimum: int):
        self.length = length
        self.minimum = minimum
        super().__init__(f"Password must be {minimum} characters or more. Provided {length}")


class TooLong(PolicyViolation):
    def __init__(self, length: int, maximum: int):
        self.length = length
        self.maximum = maximum
        super().__init__(f"Password must be {maximum} characters or less. Provided {length}")


class ForbiddenChar(PolicyViolation):
    def __init__(self, char: str):
        self.char = char
        super().__init__(f"Password contains invalid character: {char}")


class InsufficientWhitespace(PolicyViolation):
    def __init__(self, found: int, required: int, char: str = "_"):
        self.found = found
        self.required = required
        self.char = char
        super().__init__(
            f"Not enough '{char}' characters provided. Provided {found}, Required: {required}"
        )


class MissingRangedDigit(PolicyViolation):
    def __init__(self, low: int, high: int):
        self.low = low
        self.high = high
        super().__init__(f"Password must contain a digit between {low}-{high}")


class AuthenticationError(AccountError):
    """Supplied password did not match the stored credential."""
    pass


class AttemptsExhaustedError(AuthenticationError):
    """Attempt budget ran out before a valid entry was given."""

    def __init__(self, message: str = "No more attempts left, exiting"):
        super().__init__(message)


class NoActiveSessionError(AccountError):
    """Command needs a logged in user but none is set."""

    def __init__(self, message: str = "No user currently logged in"):
        super().__init__(message)


class AccountExistsError(AccountError):
    """Username chosen for a new account is already registered."""
    pass


class InputAbortError(AccountError):
    """User cancelled a prompt or input reached EOF."""

    def __init__(self, message: str = "Input aborted"):
        super().__init__(message)
