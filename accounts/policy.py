"""New password validation rules.

Rules run in a fixed order and stop at the first failure so the user gets
one precise reason per attempt:

1. length within [min_length, max_length]
2. no forbidden characters
3. at least min_whitespace occurrences of whitespace_char
4. at least one digit in [digit_low, digit_high]
"""

from collections import Counter
from typing import Optional

from accounts.config import PasswordPolicy
from accounts.errors import (
    ForbiddenChar,
    InsufficientWhitespace,
    MissingRangedDigit,
    PolicyViolation,
    TooLong,
    TooShort,
)


def _check_length(candidate: str, policy: PasswordPolicy) -> None:
    length = len(candidate)
    if length < policy.min_length:
        raise TooShort(length, policy.min_length)
    if length > policy.max_length:
        raise TooLong(length, policy.max_length)


def _count_chars(candidate: str, policy: PasswordPolicy) -> Counter:
    """Count character occurrences, failing on the first forbidden one.

    Returns:
        Counter of every character seen

    Raises:
        ForbiddenChar: On the first character in policy.forbidden_chars
    """
    forbidden = set(policy.forbidden_chars)
    counts: Counter = Counter()
    for char in candidate:
        if char in forbidden:
            raise ForbiddenChar(char)
        counts[char] += 1
    return counts


def _check_whitespace(counts: Counter, policy: PasswordPolicy) -> None:
    found = counts[policy.whitespace_char]
    if found < policy.min_whitespace:
        raise InsufficientWhitespace(found, policy.min_whitespace, policy.whitespace_char)


def _check_digits(counts: Counter, policy: PasswordPolicy) -> None:
    if not any(counts[digit] for digit in policy.required_digits):
        raise MissingRangedDigit(policy.digit_low, policy.digit_high)


def validate_password(candidate: str, policy: PasswordPolicy) -> None:
    """Validate a new password against the policy.

    Args:
        candidate: Password to validate
        policy: Thresholds to apply

    Raises:
        PolicyViolation: Subclass naming the first rule that failed
    """
    _check_length(candidate, policy)
    counts = _count_chars(candidate, policy)
    _check_whitespace(counts, policy)
    _check_digits(counts, policy)


def check_password(candidate: str, policy: PasswordPolicy) -> Optional[PolicyViolation]:
    """Non-raising variant of validate_password.

    Returns:
        The violation, or None if the candidate passes
    """
    try:
        validate_password(candidate, policy)
    except PolicyViolation as violation:
        return violation
    return None


def describe_policy(policy: PasswordPolicy) -> str:
    """Render the restriction list shown before a new password prompt."""
    symbols = ", ".join(f"'{c}'" for c in policy.forbidden_chars)
    lines = [
        "Password restrictions:",
        f"- {policy.min_length} character minimum, {policy.max_length} character maximum",
        f"- {policy.min_whitespace} '{policy.whitespace_char}' characters minimum",
        f"- 1 digit between {policy.digit_low}-{policy.digit_high}",
        f"- can not contain the following symbols: {symbols}",
    ]
    return "\n".join(lines)
