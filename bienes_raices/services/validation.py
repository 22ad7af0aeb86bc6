"""Declarative form validation.

A form is checked against an ordered list of ``(field, check, message)``
rules. Each check receives the field value and the whole form, so rules like
"must equal the password field" need no special casing.
"""

from collections.abc import Callable, Mapping, Sequence

from email_validator import EmailNotValidError, validate_email

Check = Callable[[str, Mapping[str, str]], bool]
Rule = tuple[str, Check, str]


def not_empty(value: str, values: Mapping[str, str]) -> bool:
    return bool(value and value.strip())


def is_email(value: str, values: Mapping[str, str]) -> bool:
    if not value:
        return False
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def min_length(length: int) -> Check:
    def check(value: str, values: Mapping[str, str]) -> bool:
        return len(value or "") >= length

    return check


def max_length(length: int) -> Check:
    def check(value: str, values: Mapping[str, str]) -> bool:
        return len(value or "") <= length

    return check


def equals_field(other: str) -> Check:
    def check(value: str, values: Mapping[str, str]) -> bool:
        return value == values.get(other)

    return check


def validate(values: Mapping[str, str], rules: Sequence[Rule]) -> list[dict[str, str]]:
    """Run every rule in order and collect one ``{"msg": ...}`` per failure."""
    errors = []
    for field, check, message in rules:
        if not check(values.get(field) or "", values):
            errors.append({"msg": message})
    return errors
