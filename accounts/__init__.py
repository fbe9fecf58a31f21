"""Skillz account core package.

Provides modular components for local account management:
- config: Configuration defaults and the AppConfig/PasswordPolicy models
- errors: Account exception hierarchy
- policy: New password validation rules
- hasher: bcrypt hashing and verification
- models: Account record
- storage: Key-value engines and the AccountStore
- events: Logging setup and account event log
- flows: Login, registration, logout and password change
"""

# Configuration
from accounts.config import (
    AppConfig,
    PasswordPolicy,
    load_config,
)

# Errors
from accounts.errors import (
    AccountError,
    PolicyViolation,
    TooShort,
    TooLong,
    ForbiddenChar,
    InsufficientWhitespace,
    MissingRangedDigit,
    AuthenticationError,
    AttemptsExhaustedError,
    NoActiveSessionError,
    AccountExistsError,
    InputAbortError,
)

# Password rules and hashing
from accounts.policy import validate_password, check_password, describe_policy
from accounts.hasher import hash_password, verify_password

# Persistence
from accounts.models import Account
from accounts.storage import (
    StorageError,
    StorageCorruptedError,
    KeyValueEngine,
    MemoryEngine,
    SqliteEngine,
    AccountStore,
    open_store,
)

# Logging
from accounts.events import configure_logging, log_account_event

# Flows
from accounts.flows import AccountFlows

__all__ = [
    # Config
    "AppConfig",
    "PasswordPolicy",
    "load_config",
    # Errors
    "AccountError",
    "PolicyViolation",
    "TooShort",
    "TooLong",
    "ForbiddenChar",
    "InsufficientWhitespace",
    "MissingRangedDigit",
    "AuthenticationError",
    "AttemptsExhaustedError",
    "NoActiveSessionError",
    "AccountExistsError",
    "InputAbortError",
    # Policy and hashing
    "validate_password",
    "check_password",
    "describe_policy",
    "hash_password",
    "verify_password",
    # Persistence
    "Account",
    "StorageError",
    "StorageCorruptedError",
    "KeyValueEngine",
    "MemoryEngine",
    "SqliteEngine",
    "AccountStore",
    "open_store",
    # Logging
    "configure_logging",
    "log_account_event",
    # Flows
    "AccountFlows",
]
