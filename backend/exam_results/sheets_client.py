import requests
from urllib.parse import quote

from exam_results.errors import UpstreamError

SHEETS_API_BASE = "https://sheets.googleapis.com/v4/spreadsheets"


def build_values_url(sheet_id, sheet_range):
    """Return the values endpoint URL for a spreadsheet range."""
    return f"{SHEETS_API_BASE}/{quote(sheet_id, safe='')}/values/{quote(sheet_range, safe='!:')}"


def fetch_grid(settings):
    """
    Fetch the raw cell grid for the configured sheet range.

    Args:
        settings: Settings with sheet_id, api_key, sheet_range and timeout

    Returns:
        list of rows, each a list of string cells (row 0 is the header row).
        An empty list when the sheet has no values.

    Raises:
        UpstreamError: network failure, non-2xx status or malformed payload
    """
    url = build_values_url(settings.sheet_id, settings.sheet_range)

    try:
        response = requests.get(url, params={"key": settings.api_key}, timeout=settings.timeout)
        response.raise_for_status()
    except requests.exceptions.HTTPError as e:
        status_code = e.response.status_code if e.response is not None else None
        message = _error_message(e.response) or str(e)
        print(f"Google Sheets API error ({status_code}): {message}")
        raise UpstreamError(message, status_code=status_code) from e
    except requests.exceptions.RequestException as e:
        print(f"Error reaching Google Sheets API: {e}")
        raise UpstreamError(str(e)) from e

    try:
        payload = response.json()
    except ValueError as e:
        raise UpstreamError("Google Sheets API returned a non-JSON response", status_code=response.status_code) from e

    if not isinstance(payload, dict):
        raise UpstreamError("Google Sheets API returned an unexpected payload", status_code=response.status_code)

    values = payload.get("values") or []
    if not isinstance(values, list) or not all(isinstance(row, list) for row in values):
        raise UpstreamError("Google Sheets API returned malformed values", status_code=response.status_code)

    print(f"Raw data has {len(values)} rows")
    return [[cell if isinstance(cell, str) else str(cell) for cell in row] for row in values]


def _error_message(response):
    """Pull the error message out of a Google API error body, if there is one."""
    if response is None:
        return None
    try:
        body = response.json()
    except ValueError:
        return response.text or None
    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict):
            return error.get("message")
        if isinstance(error, str):
            return error
    return None
