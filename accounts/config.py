"""Centralized configuration.

Defaults live in module constants and can be overridden via environment
variables. `load_config()` reads the overrides and gathers them into an
explicit, validated `AppConfig` that is passed to the validator and flows, so
no rule logic reads module state.
"""

import os
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator

# File paths
DATA_DIR = os.path.join(os.path.expanduser("~"), ".skillz")
DB_PATH = os.path.join(DATA_DIR, "users.db")
LOG_DIR = os.path.join(DATA_DIR, "logs")
LOG_FILE_NAME = "skillz.log"
EVENT_LOG_FILE_NAME = "account_events.jsonl"
LOG_LEVEL = "INFO"

# Store layout
USERS_BUCKET = "skillz.users.bucket"
CURRENT_USER_BUCKET = "skillz.current.user.bucket"
CURRENT_USER_KEY = "current.user"

# Password restrictions
MIN_PASSWORD_LENGTH = 10
MAX_PASSWORD_LENGTH = 32
FORBIDDEN_CHARS = ("$", "^", "&", "*", "(", ")", "[", "]")
WHITESPACE_CHAR = "_"
MIN_WHITESPACE_COUNT = 3
REQUIRED_DIGIT_LOW = 4
REQUIRED_DIGIT_HIGH = 9

# Authentication
MAX_ATTEMPTS = 5
BCRYPT_ROUNDS = 12

# Environment overrides, read by load_config()
ENV_OVERRIDES = {
    "db_path": "SKILLZ_DB_PATH",
    "log_dir": "SKILLZ_LOG_DIR",
    "log_level": "SKILLZ_LOG_LEVEL",
    "max_attempts": "SKILLZ_MAX_ATTEMPTS",
    "bcrypt_rounds": "SKILLZ_BCRYPT_ROUNDS",
}

# Log rotation
LOG_MAX_BYTES = int(os.environ.get("SKILLZ_LOG_MAX_BYTES", 1024 * 1024))  # 1MB default
LOG_BACKUP_COUNT = int(os.environ.get("SKILLZ_LOG_BACKUP_COUNT", 3))


class PasswordPolicy(BaseModel):
    """Thresholds for new password validation."""

    min_length: int = Field(default=MIN_PASSWORD_LENGTH, ge=1)
    max_length: int = Field(default=MAX_PASSWORD_LENGTH, ge=1)
    forbidden_chars: tuple[str, ...] = FORBIDDEN_CHARS
    whitespace_char: str = Field(default=WHITESPACE_CHAR, min_length=1, max_length=1)
    min_whitespace: int = Field(default=MIN_WHITESPACE_COUNT, ge=0)
    digit_low: int = Field(default=REQUIRED_DIGIT_LOW, ge=0, le=9)
    digit_high: int = Field(default=REQUIRED_DIGIT_HIGH, ge=0, le=9)

    model_config = ConfigDict(frozen=True, validate_default=True)

    @model_validator(mode="after")
    def _check_ranges(self) -> "PasswordPolicy":
        if self.min_length > self.max_length:
            raise ValueError("min_length must not exceed max_length")
        if self.digit_low > self.digit_high:
            raise ValueError("digit_low must not exceed digit_high")
        if any(len(c) != 1 for c in self.forbidden_chars):
            raise ValueError("forbidden_chars must be single characters")
        return self

    @property
    def required_digits(self) -> tuple[str, ...]:
        return tuple(str(d) for d in range(self.digit_low, self.digit_high + 1))


class AppConfig(BaseModel):
    """Runtime settings for one command invocation."""

    db_path: str = DB_PATH
    log_dir: str = LOG_DIR
    log_level: str = LOG_LEVEL
    max_attempts: int = Field(default=MAX_ATTEMPTS, ge=1)
    bcrypt_rounds: int = Field(default=BCRYPT_ROUNDS, ge=4, le=31)
    policy: PasswordPolicy = Field(default_factory=PasswordPolicy)

    model_config = ConfigDict(frozen=True, validate_default=True)


def load_config(db_path: Optional[str] = None) -> AppConfig:
    """Build the application config from module defaults and the environment.

    Args:
        db_path: Optional override for the store file location

    Returns:
        Validated AppConfig

    Raises:
        pydantic.ValidationError: If an environment override is malformed or out of range
    """
    overrides = {
        field: os.environ[name]
        for field, name in ENV_OVERRIDES.items()
        if os.environ.get(name)
    }
    if db_path:
        overrides["db_path"] = db_path
    return AppConfig(**overrides)
