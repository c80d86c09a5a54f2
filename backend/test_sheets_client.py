import os
import sys
import unittest
from unittest import mock

import requests


def _ensure_backend_on_path():
    here = os.path.dirname(__file__)
    if here not in sys.path:
        sys.path.insert(0, here)


_ensure_backend_on_path()

from exam_results.config import Settings  # noqa: E402
from exam_results.errors import UpstreamError  # noqa: E402
from exam_results.sheets_client import build_values_url, fetch_grid  # noqa: E402


def _fake_response(status_code=200, payload=None, json_error=False, text=""):
    response = mock.Mock()
    response.status_code = status_code
    response.text = text
    if json_error:
        response.json.side_effect = ValueError("not json")
    else:
        response.json.return_value = payload
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.exceptions.HTTPError(
            f"{status_code} Client Error", response=response
        )
    return response


class FetchGridTest(unittest.TestCase):
    def setUp(self):
        self.settings = Settings(sheet_id="sheet-123", api_key="key-abc")
        patcher = mock.patch("exam_results.sheets_client.requests.get")
        self.get = patcher.start()
        self.addCleanup(patcher.stop)

    def test_requests_fixed_range_with_api_key(self):
        self.get.return_value = _fake_response(payload={"values": [["rollNumber"], ["1"]]})

        grid = fetch_grid(self.settings)

        self.assertEqual(grid, [["rollNumber"], ["1"]])
        self.get.assert_called_once_with(
            "https://sheets.googleapis.com/v4/spreadsheets/sheet-123/values/Sheet1!A1:Z100",
            params={"key": "key-abc"},
            timeout=None,
        )

    def test_timeout_is_passed_through(self):
        self.get.return_value = _fake_response(payload={"values": []})
        fetch_grid(Settings(sheet_id="s", api_key="k", timeout=5.0))
        self.assertEqual(self.get.call_args.kwargs["timeout"], 5.0)

    def test_missing_values_is_empty_grid(self):
        self.get.return_value = _fake_response(payload={"range": "Sheet1!A1:Z100"})
        self.assertEqual(fetch_grid(self.settings), [])

    def test_non_string_cells_are_stringified(self):
        self.get.return_value = _fake_response(payload={"values": [["rollNumber", "marks1"], [101, 45.5]]})
        self.assertEqual(fetch_grid(self.settings)[1], ["101", "45.5"])

    def test_network_failure(self):
        self.get.side_effect = requests.exceptions.ConnectionError("connection refused")
        with self.assertRaises(UpstreamError) as ctx:
            fetch_grid(self.settings)
        self.assertIn("connection refused", str(ctx.exception))
        self.assertIsNone(ctx.exception.status_code)

    def test_http_error_uses_google_error_message(self):
        self.get.return_value = _fake_response(
            status_code=400,
            payload={"error": {"code": 400, "message": "API key not valid."}},
        )
        with self.assertRaises(UpstreamError) as ctx:
            fetch_grid(self.settings)
        self.assertEqual(str(ctx.exception), "API key not valid.")
        self.assertEqual(ctx.exception.status_code, 400)

    def test_http_error_without_json_body(self):
        self.get.return_value = _fake_response(status_code=503, json_error=True, text="Service Unavailable")
        with self.assertRaises(UpstreamError) as ctx:
            fetch_grid(self.settings)
        self.assertEqual(str(ctx.exception), "Service Unavailable")
        self.assertEqual(ctx.exception.status_code, 503)

    def test_non_json_success_body(self):
        self.get.return_value = _fake_response(json_error=True)
        with self.assertRaises(UpstreamError):
            fetch_grid(self.settings)

    def test_malformed_payloads(self):
        for payload in (["not", "an", "object"], {"values": "oops"}, {"values": [["ok"], "bad row"]}):
            self.get.return_value = _fake_response(payload=payload)
            with self.assertRaises(UpstreamError):
                fetch_grid(self.settings)


class BuildValuesUrlTest(unittest.TestCase):
    def test_escapes_sheet_names_with_spaces(self):
        self.assertEqual(
            build_values_url("abc", "Class 10!A1:Z100"),
            "https://sheets.googleapis.com/v4/spreadsheets/abc/values/Class%2010!A1:Z100",
        )


if __name__ == "__main__":
    unittest.main()
