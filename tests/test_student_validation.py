from __future__ import annotations

import re
import sys
from pathlib import Path

import pytest

# Make the roster package importable during local test runs
ROOT = Path(__file__).resolve().parents[1]
if str(ROOT) not in sys.path:
    sys.path.insert(0, str(ROOT))

from roster.domain.students import (  # noqa: E402
    StudentFields,
    StudentRecord,
    ValidationIssue,
    matches_query,
    new_record_id,
    trim,
    validate_student,
)


def test_all_blank_fields_are_an_empty_record():
    assert validate_student("", "", "", "").issue is ValidationIssue.EMPTY_RECORD
    assert validate_student("  ", "\t", " ", None).issue is ValidationIssue.EMPTY_RECORD


def test_invalid_name_wins_over_every_other_invalid_field():
    result = validate_student("A1", "abc", "not-an-email", "123")
    assert not result.ok
    assert result.issue is ValidationIssue.INVALID_NAME
    assert result.message == "Name must contain only letters and spaces."


def test_blank_name_is_invalid_when_other_fields_are_filled():
    assert validate_student("", "1023", "a@b.com", "5551234567").issue is ValidationIssue.INVALID_NAME


@pytest.mark.parametrize(
    "fields, issue",
    [
        (("Ann Lee", "10a3", "bad", "1"), ValidationIssue.INVALID_STUDENT_ID),
        (("Ann Lee", "", "a@b.com", "5551234567"), ValidationIssue.INVALID_STUDENT_ID),
        (("Ann Lee", "1023", "a@b", "1"), ValidationIssue.INVALID_EMAIL),
        (("Ann Lee", "1023", "a b@c.com", "5551234567"), ValidationIssue.INVALID_EMAIL),
        (("Ann Lee", "1023", "a@b.com", "555123456"), ValidationIssue.INVALID_CONTACT),
        (("Ann Lee", "1023", "a@b.com", "555-123-4567"), ValidationIssue.INVALID_CONTACT),
    ],
)
def test_checks_run_in_order(fields, issue):
    assert validate_student(*fields).issue is issue


def test_only_ascii_digits_count_as_numeric():
    result = validate_student("Ann", "١٢٣", "a@b.com", "5551234567")
    assert result.issue is ValidationIssue.INVALID_STUDENT_ID


def test_success_returns_trimmed_fields():
    result = validate_student("  Ann Lee ", " 1023", "a@b.com  ", " 5551234567 ")
    assert result.ok
    assert result.message == ""
    assert result.fields == StudentFields("Ann Lee", "1023", "a@b.com", "5551234567")


def test_record_serializes_with_camel_case_student_id():
    record = StudentRecord.build("abc", StudentFields("Ann Lee", "1023", "a@b.com", "5551234567"))
    data = record.to_dict()
    assert list(data) == ["id", "name", "studentId", "email", "contact"]
    assert StudentRecord.from_dict(data) == record


def test_from_dict_rejects_missing_or_non_string_fields():
    with pytest.raises(ValueError):
        StudentRecord.from_dict({"id": "1", "name": "Ann"})
    with pytest.raises(ValueError):
        StudentRecord.from_dict({"id": 1, "name": "Ann", "studentId": "1", "email": "a@b.c", "contact": "1"})
    with pytest.raises(ValueError):
        StudentRecord.from_dict(["not", "a", "record"])


def test_query_matches_name_ignoring_case_and_student_id_exactly():
    record = StudentRecord("x1", "Zed Park", "AB12", "z@p.io", "5550001111")
    assert matches_query(record, "")
    assert matches_query(record, "zED")
    assert matches_query(record, "AB1")
    assert not matches_query(record, "ab1")


def test_new_record_id_is_base36_with_random_suffix():
    first = new_record_id()
    second = new_record_id()
    assert re.fullmatch(r"[0-9a-z]{7,}", first)
    assert first != second


def test_information_separators_are_not_whitespace():
    assert validate_student("Ann\x1fLee", "1023", "a@b.com", "5551234567").issue is ValidationIssue.INVALID_NAME
    assert validate_student("\x1cAnn Lee", "1023", "a@b.com", "5551234567").issue is ValidationIssue.INVALID_NAME
    assert validate_student("Ann Lee", "1023", "a\x1fb@c.com", "5551234567").ok


def test_trim_strips_unicode_spaces_but_not_separators_or_nel():
    assert trim("\u00a0\ufeffAnn Lee\u3000\n") == "Ann Lee"
    assert trim("\x1fAnn\x85") == "\x1fAnn\x85"
    result = validate_student("\u00a0Ann Lee\ufeff", "1023", "a@b.com", "5551234567")
    assert result.fields.name == "Ann Lee"
