"""
Flask API backend for the exam results page
Reads student results from Google Sheets and exposes them as REST endpoints
"""
from datetime import datetime, timezone

from flask import Flask, jsonify, request
from flask_cors import CORS

from exam_results.config import load_settings
from exam_results.errors import NoDataError, StudentNotFound, UpstreamError, ValidationError
from exam_results.logger import log_lookup, log_request
from exam_results.results import find_student, format_student
from exam_results.sheets_client import fetch_grid
from exam_results.table import normalize_grid


def _error(message, status_code=200, details=None):
    body = {"status": "error", "message": message}
    if details is not None:
        body["details"] = details
    return jsonify(body), status_code


def create_app(settings=None):
    """
    Build the Flask app.

    Args:
        settings: Settings to use. If None, loads them from the environment.
    """
    if settings is None:
        settings = load_settings()

    app = Flask(__name__)
    app.config['SETTINGS'] = settings
    # Keep the response field order the frontend was written against
    app.json.sort_keys = False

    CORS(
        app,
        origins=list(settings.cors_origins),
        methods=['GET'],
        allow_headers=['Content-Type'],
        send_wildcard='*' in settings.cors_origins
    )

    def server_error(message, e):
        details = (str(e) or type(e).__name__) if settings.is_development else None
        return _error(message, 500, details)

    @app.before_request
    def record_request():
        log_request(settings.logs_dir, request.method, request.full_path.rstrip('?'), request.headers.get('Origin'))

    @app.route('/health', methods=['GET'])
    def health():
        """Health check"""
        return jsonify({
            "status": "healthy",
            "message": "Backend is operational",
            "timestamp": datetime.now(timezone.utc).isoformat()
        })

    @app.route('/api/exam-results', methods=['GET'])
    def exam_results():
        """Look up a student's exam results by roll number"""
        roll_number = request.args.get('rollNumber')
        print(f"Fetching results for roll number: {roll_number}")
        try:
            if not roll_number or not roll_number.strip():
                raise ValidationError("Roll number is required")

            grid = fetch_grid(settings)
            records = normalize_grid(grid)
            student = find_student(records, roll_number)
            formatted = format_student(student, default_school=settings.default_school)

            print(f"Found student: {formatted['name'] or 'Unknown'}")
            log_lookup(
                settings.logs_dir,
                roll_number=roll_number,
                outcome='found',
                student_name=formatted['name'],
                result=formatted['result'],
                percentage=formatted['percentage']
            )
            return jsonify({"status": "success", "student": formatted})
        except ValidationError:
            return _error("Roll number is required", 400)
        except StudentNotFound:
            print(f"No student found with roll number: {roll_number}")
            log_lookup(settings.logs_dir, roll_number=roll_number, outcome='not_found')
            return _error("Student not found")
        except NoDataError:
            print("Warning: Google Sheet has no data or only headers")
            log_lookup(settings.logs_dir, roll_number=roll_number, outcome='no_data')
            return _error("No data found in the Google Sheet", 500)
        except UpstreamError as e:
            print(f"Error fetching exam results: {e}")
            log_lookup(
                settings.logs_dir,
                roll_number=roll_number,
                outcome='upstream_error',
                error=str(e),
                status_code=e.status_code
            )
            return server_error("Unable to fetch exam results", e)
        except Exception as e:
            print(f"Unexpected error fetching exam results: {e!r}")
            log_lookup(settings.logs_dir, roll_number=roll_number, outcome='error', error=repr(e))
            return server_error("Unable to fetch exam results", e)

    return app


app = create_app()


if __name__ == '__main__':
    _settings = app.config['SETTINGS']
    print(f"Backend proxy server running on port {_settings.port}")
    print(f"Environment: {_settings.environment}")
    print(f"CORS: allowing origins {', '.join(_settings.cors_origins)}")
    app.run(debug=_settings.is_development, host='0.0.0.0', port=_settings.port)
