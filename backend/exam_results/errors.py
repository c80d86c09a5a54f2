"""
Error types raised while looking up exam results.
The HTTP layer maps each one to a JSON error response.
"""


class ExamResultsError(Exception):
    """Base class for every lookup failure."""


class ValidationError(ExamResultsError):
    """The request is missing a required value (e.g. the roll number)."""


class UpstreamError(ExamResultsError):
    """The Google Sheets API could not be reached or returned something unusable."""

    def __init__(self, message, status_code=None):
        super().__init__(message)
        self.status_code = status_code


class NoDataError(ExamResultsError):
    """The sheet was fetched but holds no data rows."""


class StudentNotFound(ExamResultsError):
    """No row matches the requested roll number."""

    def __init__(self, roll_number):
        super().__init__(f"No student found with roll number: {roll_number}")
        self.roll_number = roll_number
