"""Domain rules for student records: field patterns, validation, ids."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Mapping, Optional
import re
import secrets
import time

# Whitespace as ECMAScript defines it for \s and String.prototype.trim; unlike
# str.isspace it excludes \x1c-\x1f and \x85 and includes \ufeff.
WHITESPACE = (
    "\t\n\x0b\x0c\r \u00a0\u1680"
    + "".join(chr(code) for code in range(0x2000, 0x200B))
    + "\u2028\u2029\u202f\u205f\u3000\ufeff"
)
_WS_CLASS = re.escape(WHITESPACE)

NAME_PATTERN = re.compile(f"[A-Za-z{_WS_CLASS}]+")
STUDENT_ID_PATTERN = re.compile(r"\d+", re.ASCII)
EMAIL_PATTERN = re.compile(f"[^@{_WS_CLASS}]+@[^@{_WS_CLASS}]+\\.[^@{_WS_CLASS}]+")
CONTACT_PATTERN = re.compile(r"\d{10,}", re.ASCII)

# Serialized field names, in column order.
RECORD_FIELDS = ("id", "name", "studentId", "email", "contact")

_BASE36 = "0123456789abcdefghijklmnopqrstuvwxyz"


class ValidationIssue(str, Enum):
    """Reasons a candidate record is rejected, in the order they are checked."""

    EMPTY_RECORD = "empty_record"
    INVALID_NAME = "invalid_name"
    INVALID_STUDENT_ID = "invalid_student_id"
    INVALID_EMAIL = "invalid_email"
    INVALID_CONTACT = "invalid_contact"

    @property
    def message(self) -> str:
        return ISSUE_MESSAGES[self]


ISSUE_MESSAGES = {
    ValidationIssue.EMPTY_RECORD: "Please fill at least one field.",
    ValidationIssue.INVALID_NAME: "Name must contain only letters and spaces.",
    ValidationIssue.INVALID_STUDENT_ID: "Student ID must be numeric.",
    ValidationIssue.INVALID_EMAIL: "Please enter a valid email.",
    ValidationIssue.INVALID_CONTACT: "Contact must be at least 10 digits.",
}


@dataclass(frozen=True)
class StudentFields:
    """The four user-editable fields, already trimmed and validated."""

    name: str
    student_id: str
    email: str
    contact: str


@dataclass(frozen=True)
class StudentRecord:
    id: str
    name: str
    student_id: str
    email: str
    contact: str

    @classmethod
    def build(cls, record_id: str, fields: StudentFields) -> "StudentRecord":
        return cls(
            id=record_id,
            name=fields.name,
            student_id=fields.student_id,
            email=fields.email,
            contact=fields.contact,
        )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "studentId": self.student_id,
            "email": self.email,
            "contact": self.contact,
        }

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "StudentRecord":
        """Build a record from its serialized form; raises ValueError on a bad shape."""
        if not isinstance(data, Mapping):
            raise ValueError("record must be an object")
        values = {}
        for key in RECORD_FIELDS:
            value = data.get(key)
            if not isinstance(value, str):
                raise ValueError(f"field {key!r} must be a string")
            values[key] = value
        return cls(
            id=values["id"],
            name=values["name"],
            student_id=values["studentId"],
            email=values["email"],
            contact=values["contact"],
        )


@dataclass(frozen=True)
class ValidationResult:
    fields: Optional[StudentFields] = None
    issue: Optional[ValidationIssue] = None

    @property
    def ok(self) -> bool:
        return self.issue is None

    @property
    def message(self) -> str:
        return self.issue.message if self.issue else ""


def trim(value: str | None) -> str:
    return (value or "").strip(WHITESPACE)


def is_valid_name(value: str) -> bool:
    return bool(NAME_PATTERN.fullmatch(trim(value)))


def is_valid_student_id(value: str) -> bool:
    return bool(STUDENT_ID_PATTERN.fullmatch(value))


def is_valid_email(value: str) -> bool:
    return bool(EMAIL_PATTERN.fullmatch(value))


def is_valid_contact(value: str) -> bool:
    return bool(CONTACT_PATTERN.fullmatch(value))


def validate_student(
    name: str | None,
    student_id: str | None,
    email: str | None,
    contact: str | None,
) -> ValidationResult:
    """
    Check raw form values and return the trimmed fields or the first issue found.

    Checks run in a fixed order (empty, name, student id, email, contact) and
    stop at the first failure, so the reported issue is deterministic.
    """
    name = trim(name)
    student_id = trim(student_id)
    email = trim(email)
    contact = trim(contact)

    if not (name or student_id or email or contact):
        return ValidationResult(issue=ValidationIssue.EMPTY_RECORD)
    if not is_valid_name(name):
        return ValidationResult(issue=ValidationIssue.INVALID_NAME)
    if not is_valid_student_id(student_id):
        return ValidationResult(issue=ValidationIssue.INVALID_STUDENT_ID)
    if not is_valid_email(email):
        return ValidationResult(issue=ValidationIssue.INVALID_EMAIL)
    if not is_valid_contact(contact):
        return ValidationResult(issue=ValidationIssue.INVALID_CONTACT)
    return ValidationResult(fields=StudentFields(name, student_id, email, contact))


def _to_base36(value: int) -> str:
    if value == 0:
        return "0"
    digits = []
    while value:
        value, rem = divmod(value, 36)
        digits.append(_BASE36[rem])
    return "".join(reversed(digits))


def new_record_id() -> str:
    """Millisecond timestamp in base 36 followed by a 6-char random suffix."""
    stamp = _to_base36(int(time.time() * 1000))
    suffix = "".join(secrets.choice(_BASE36) for _ in range(6))
    return stamp + suffix


def matches_query(record: StudentRecord, query: str) -> bool:
    """Name matches case-insensitively; student id matches the raw query."""
    if not query:
        return True
    return query.lower() in record.name.lower() or query in record.student_id
