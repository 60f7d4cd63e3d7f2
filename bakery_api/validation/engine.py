"""
Bakery API — Field validation engine

Rules are declared per field path ("name", "address.3", "orderDetails.0")
as a chain of checks and sanitizers:

    Check("name").not_empty("Name field is empty").trim()
        .length(6, 65, "...").matches(r"[A-Za-z\\s]+", "...")

A chain stops at its first failing check, but every rule in a rule set runs,
so one submission can produce several errors. Conditional groups are
expressed with OneOf over Require/Equals branches.
"""
import copy
import re
from dataclasses import dataclass, field
from typing import Any, Callable, Sequence

from email_validator import validate_email, EmailNotValidError

NUMERIC_RE = re.compile(r"[+-]?([0-9]*[.])?[0-9]+")
ALPHA_RE = re.compile(r"[A-Za-z]+")
US_POSTAL_RE = re.compile(r"[0-9]{5}(-[0-9]{4})?")
US_PHONE_RE = re.compile(
    r"((\+1|1)?( |-)?)?(\([2-9][0-9]{2}\)|[2-9][0-9]{2})( |-)?([0-9]{3}( |-)?[0-9]{4})"
)
BOOLEAN_STRINGS = {"true", "false", "1", "0"}
GMAIL_DOMAINS = {"gmail.com", "googlemail.com"}


@dataclass(frozen=True)
class FieldError:
    field: str
    message: str


@dataclass
class ValidationResult:
    errors: list[FieldError]
    data: dict[str, Any] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.errors


# ─── Payload paths ────────────────────────────────────────────────────────────

def get_path(data: Any, path: str) -> Any:
    current = data
    for part in path.split("."):
        if isinstance(current, dict):
            if part not in current:
                return None
            current = current[part]
        elif isinstance(current, list) and part.isdigit():
            index = int(part)
            if index >= len(current):
                return None
            current = current[index]
        else:
            return None
    return current


def set_path(data: Any, path: str, value: Any) -> None:
    parent_path, _, last = path.rpartition(".")
    parent = get_path(data, parent_path) if parent_path else data
    if isinstance(parent, dict) and last in parent:
        parent[last] = value
    elif isinstance(parent, list) and last.isdigit() and int(last) < len(parent):
        parent[int(last)] = value


def as_text(value: Any) -> str | None:
    """Scalar payload values are checked as text; containers have no text form."""
    if value is None:
        return ""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


# ─── Primitive checks ─────────────────────────────────────────────────────────

def _is_present(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return bool(value.strip())
    if isinstance(value, (list, dict)):
        return bool(value)
    return True


def _full_match(pattern: re.Pattern) -> Callable[[Any], bool]:
    def check(value: Any) -> bool:
        text = as_text(value)
        return text is not None and pattern.fullmatch(text) is not None
    return check


def _is_email(value: Any) -> bool:
    text = as_text(value)
    if not text:
        return False
    try:
        validate_email(text, check_deliverability=False)
    except EmailNotValidError:
        return False
    return True


def _trim(value: Any) -> Any:
    text = as_text(value)
    return value if text is None else text.strip()


def _normalize_email(value: Any) -> Any:
    text = as_text(value)
    if not text or "@" not in text:
        return value
    local, _, domain = text.lower().rpartition("@")
    if domain in GMAIL_DOMAINS:
        local = local.split("+", 1)[0].replace(".", "")
        domain = "gmail.com"
    return f"{local}@{domain}"


# ─── Rules ────────────────────────────────────────────────────────────────────

class Check:
    """Ordered chain of sanitizers and checks for one field path."""

    def __init__(self, path: str):
        self.path = path
        self._steps: list[tuple[Callable[[Any], Any], str | None]] = []

    def _check(self, fn: Callable[[Any], bool], message: str) -> "Check":
        self._steps.append((fn, message))
        return self

    def _sanitize(self, fn: Callable[[Any], Any]) -> "Check":
        self._steps.append((fn, None))
        return self

    def not_empty(self, message: str) -> "Check":
        return self._check(_is_present, message)

    def trim(self) -> "Check":
        return self._sanitize(_trim)

    def normalize_email(self) -> "Check":
        return self._sanitize(_normalize_email)

    def length(self, min: int = 0, max: int | None = None, message: str = "Invalid length") -> "Check":
        def check(value: Any) -> bool:
            text = as_text(value)
            if text is None:
                return False
            return len(text) >= min and (max is None or len(text) <= max)
        return self._check(check, message)

    def matches(self, pattern: str | re.Pattern, message: str) -> "Check":
        compiled = re.compile(pattern) if isinstance(pattern, str) else pattern
        return self._check(_full_match(compiled), message)

    def is_alpha(self, message: str) -> "Check":
        return self._check(_full_match(ALPHA_RE), message)

    def is_numeric(self, message: str) -> "Check":
        return self._check(_full_match(NUMERIC_RE), message)

    def is_postal_code(self, message: str) -> "Check":
        return self._check(_full_match(US_POSTAL_RE), message)

    def is_phone(self, message: str) -> "Check":
        return self._check(_full_match(US_PHONE_RE), message)

    def is_email(self, message: str) -> "Check":
        return self._check(_is_email, message)

    def is_boolean(self, message: str) -> "Check":
        return self._check(lambda v: (as_text(v) or "").lower() in BOOLEAN_STRINGS, message)

    def is_array(self, message: str) -> "Check":
        return self._check(lambda v: isinstance(v, list), message)

    def run(self, data: Any) -> tuple[FieldError | None, Any]:
        value = get_path(data, self.path)
        for fn, message in self._steps:
            if message is None:
                value = fn(value)
            elif not fn(value):
                return FieldError(self.path, message), value
        return None, value

    def apply(self, data: Any) -> list[FieldError]:
        error, value = self.run(data)
        if error:
            return [error]
        set_path(data, self.path, value)
        return []


class Equals:
    """Condition: the (trimmed) field equals ``expected``. Never reports an error itself."""

    def __init__(self, path: str, expected: str):
        self.path = path
        self.expected = expected

    def holds(self, data: Any) -> bool:
        return (as_text(get_path(data, self.path)) or "").strip() == self.expected


class Require:
    """A block of checks, selected only while all of its Equals guards hold."""

    def __init__(self, *rules: "Check | Equals"):
        self.guards = [r for r in rules if isinstance(r, Equals)]
        self.checks = [r for r in rules if isinstance(r, Check)]

    def selected(self, data: Any) -> bool:
        return all(g.holds(data) for g in self.guards)

    def run(self, data: Any) -> tuple[list[FieldError], list[tuple[str, Any]]]:
        errors: list[FieldError] = []
        values: list[tuple[str, Any]] = []
        for check in self.checks:
            error, value = check.run(data)
            if error:
                errors.append(error)
            else:
                values.append((check.path, value))
        return errors, values


class OneOf:
    """
    Disjunction of branches. Passes when any selected branch passes; otherwise
    reports the errors of the branches that were selected.
    """

    def __init__(self, *branches: "Require | Equals"):
        self.branches = [b if isinstance(b, Require) else Require(b) for b in branches]

    def apply(self, data: Any) -> list[FieldError]:
        failures: list[FieldError] = []
        passed: list[tuple[str, Any]] | None = None
        for branch in self.branches:
            if not branch.selected(data):
                continue
            errors, values = branch.run(data)
            if errors:
                failures.extend(errors)
            elif passed is None:
                passed = values
        if passed is None:
            return failures
        for path, value in passed:
            set_path(data, path, value)
        return []


Rule = Check | OneOf


def validate(rules: Sequence[Rule], payload: Any) -> ValidationResult:
    """Run every rule against a copy of ``payload``; sanitized values land in ``data``."""
    data = copy.deepcopy(payload) if isinstance(payload, dict) else {}
    errors: list[FieldError] = []
    for rule in rules:
        errors.extend(rule.apply(data))
    return ValidationResult(errors=errors, data=data)
