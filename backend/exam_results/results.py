"""
Student lookup and result formatting.

Takes the records produced by table.normalize_grid, finds the requested
student and reshapes the row into the JSON contract the results page expects.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, asdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, List, Optional, Sequence

from exam_results.config import DEFAULT_SCHOOL
from exam_results.errors import StudentNotFound, ValidationError
from exam_results.table import StudentRecord

MAX_SUBJECTS = 5
DEFAULT_MAX_MARKS = 100
PASS_PERCENTAGE = 33
CGPA_DIVISOR = 9.5

# (lower bound inclusive, grade), highest first
GRADE_THRESHOLDS = [
    (90, "A"),
    (80, "B"),
    (70, "C"),
    (60, "D"),
]
FAILING_GRADE = "F"

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


@dataclass(frozen=True)
class SubjectEntry:
    name: str
    maxMarks: int
    obtained: int
    grade: str


def parse_int_or(value: Optional[str], default: int) -> int:
    """
    Parse the leading integer of a cell ("45" -> 45, "45.5" -> 45, " 7 marks" -> 7).
    Returns default when the cell does not start with a number.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(str(value))
    if not match:
        return default
    return int(match.group(1))


def to_fixed(value: float, places: int) -> str:
    """Format value with a fixed number of decimals, rounding half up."""
    quantum = Decimal(1).scaleb(-places)
    return str(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


def grade_for_percentage(percentage: float) -> str:
    for lower_bound, grade in GRADE_THRESHOLDS:
        if percentage >= lower_bound:
            return grade
    return FAILING_GRADE


def _field(record: StudentRecord, key: str) -> str:
    return record.get(key) or ""


def find_student(records: Sequence[StudentRecord], roll_number: Optional[str]) -> StudentRecord:
    """
    Return the first record whose rollNumber matches roll_number.

    Both sides are stripped and compared as strings, so " 101" matches "101".

    Raises:
        ValidationError: roll_number is missing or blank
        StudentNotFound: no record matches
    """
    if roll_number is None or not str(roll_number).strip():
        raise ValidationError("Roll number is required")

    wanted = str(roll_number).strip()
    for record in records:
        if _field(record, "rollNumber").strip() == wanted:
            return record
    raise StudentNotFound(wanted)


def extract_subjects(record: StudentRecord) -> List[SubjectEntry]:
    """Build the subject list from subject{i}/marks{i}/maxMarks{i} columns (i = 1..5)."""
    subjects = []
    for i in range(1, MAX_SUBJECTS + 1):
        name = _field(record, f"subject{i}")
        marks = _field(record, f"marks{i}")
        if not name or not marks:
            continue

        obtained = parse_int_or(marks, 0)
        max_marks = parse_int_or(_field(record, f"maxMarks{i}"), DEFAULT_MAX_MARKS)
        # A non-positive maxMarks grades as 0% instead of dividing by zero
        percentage = obtained / max_marks * 100 if max_marks > 0 else 0.0

        subjects.append(SubjectEntry(
            name=name,
            maxMarks=max_marks,
            obtained=obtained,
            grade=grade_for_percentage(percentage),
        ))
    return subjects


def format_student(record: StudentRecord, default_school: str = DEFAULT_SCHOOL) -> Dict[str, Any]:
    """
    Shape a matched record into the response payload.

    percentage and cgpa stay "0" (and result "FAIL") when no subject carries
    any max marks.
    """
    subjects = extract_subjects(record)
    total_obtained = sum(s.obtained for s in subjects)
    total_marks = sum(s.maxMarks for s in subjects)

    percentage = "0"
    cgpa = "0"
    result = "FAIL"
    if total_marks > 0:
        overall = total_obtained / total_marks * 100
        percentage = to_fixed(overall, 2)
        cgpa = to_fixed(overall / CGPA_DIVISOR, 1)
        result = "PASS" if Decimal(percentage) >= PASS_PERCENTAGE else "FAIL"

    return {
        "name": _field(record, "name"),
        "class": _field(record, "class"),
        "school": _field(record, "school") or default_school,
        "subjects": [asdict(s) for s in subjects],
        "totalObtained": total_obtained,
        "totalMarks": total_marks,
        "percentage": percentage,
        "cgpa": cgpa,
        "result": result,
    }
