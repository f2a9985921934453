"""
Field Validators.

Validators take a field name and value and return a failure or None.
``validate`` runs a chain of them and packs the result into a FormEntry.
"""

import re
from typing import Any, Callable, List, Optional, Sequence
from urllib.parse import urlparse

from .state import FormEntry, ValidationFailure

Validator = Callable[[str, Any], Optional[ValidationFailure]]

EMAIL_PATTERN = re.compile(r"\S+@\S+\.\S+")

# Expressions are resolved at runtime, so accept anything that starts with one
EXPRESSION_PREFIX = "@"


def validate(name: str, value: Any, validators: Sequence[Validator]) -> FormEntry:
    """Run every validator against ``value``; failures are collected, never raised."""
    failures: List[ValidationFailure] = []
    for validator in validators:
        failure = validator(name, value)
        if failure is not None:
            failures.append(failure)
    return FormEntry(value=value, validation_failures=tuple(failures))


def validate_required(name: str, value: Any) -> Optional[ValidationFailure]:
    if value is None:
        return ValidationFailure(f"{name} is required")
    if isinstance(value, str) and not value.strip():
        return ValidationFailure(f"{name} is required")
    if isinstance(value, (list, tuple, dict)) and len(value) == 0:
        return ValidationFailure(f"{name} is required")
    return None


def validate_url(name: str, value: Any) -> Optional[ValidationFailure]:
    if not value or str(value).startswith(EXPRESSION_PREFIX):
        return None
    parsed = urlparse(str(value))
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return ValidationFailure(f"{name} is not a valid URL")
    return None


def validate_email(name: str, value: Any) -> Optional[ValidationFailure]:
    """Each address (or the single value) must look like an email or an expression."""
    values = value if isinstance(value, (list, tuple)) else [value]
    for address in values:
        if not address or str(address).startswith(EXPRESSION_PREFIX):
            continue
        if not EMAIL_PATTERN.fullmatch(str(address)):
            return ValidationFailure(f"{name} has an invalid email address: {address}")
    return None


def validate_max_length(limit: int) -> Validator:
    def validator(name: str, value: Any) -> Optional[ValidationFailure]:
        if value is not None and len(value) > limit:
            return ValidationFailure(f"{name} cannot be more than {limit} characters")
        return None

    return validator
