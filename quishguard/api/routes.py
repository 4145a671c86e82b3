"""API routes."""
import asyncio

from flask import Blueprint, Response, current_app, request, jsonify
from flask_limiter import Limiter
from flask_limiter.util import get_remote_address
from werkzeug.exceptions import HTTPException

from quishguard.config import config
from quishguard.core.analyzer import URLAnalyzer
from quishguard.core.reporting import ReportingService
from quishguard.exceptions import ValidationError, QuishGuardError
from quishguard.models import AnalysisRequest
from quishguard.utils.logger import get_logger

logger = get_logger(__name__)

# Create blueprint
api_bp = Blueprint('api', __name__)

# Initialize limiter
limiter = Limiter(
    key_func=get_remote_address,
    default_limits=[
        f"{config.rate_limit_per_day} per day",
        f"{config.rate_limit_per_hour} per hour"
    ],
    storage_uri="memory://"
)


def _analyzer() -> URLAnalyzer:
    return current_app.extensions['quishguard.analyzer']


def _reporting() -> ReportingService:
    return current_app.extensions['quishguard.reporting']


def _run(coro):
    """Drive a coroutine to completion on a private event loop."""
    loop = asyncio.new_event_loop()
    try:
        return loop.run_until_complete(coro)
    finally:
        loop.close()


@api_bp.errorhandler(ValidationError)
def handle_validation_error(e):
    logger.warning(f"Validation error: {str(e)}")
    return jsonify({'error': str(e)}), 400


@api_bp.errorhandler(QuishGuardError)
def handle_engine_error(e):
    logger.error(f"Engine error: {str(e)}")
    return jsonify({'error': 'Request failed', 'message': str(e)}), 500


@api_bp.errorhandler(Exception)
def handle_unexpected_error(e):
    if isinstance(e, HTTPException):
        return e
    logger.error(f"Unexpected error: {str(e)}", exc_info=True)
    return jsonify({'error': 'Internal server error'}), 500


def _json_body() -> dict:
    data = request.get_json(silent=True)
    if not data:
        raise ValidationError('Request body is required')
    return data


@api_bp.route('/health', methods=['GET'])
def health_check():
    """Health check endpoint."""
    return jsonify({
        'status': 'healthy',
        'version': config.version,
        'environment': config.env
    })


@api_bp.route('/check', methods=['POST'])
@limiter.limit(f"{config.rate_limit_per_minute} per minute")
def check_url():
    """
    Analyze a scanned URL.

    Request body:
        {
            "url": "https://example.com",
            "force_refresh": false
        }
    """
    data = _json_body()
    if not data.get('url'):
        raise ValidationError('URL is required')

    analysis_request = AnalysisRequest(
        url=str(data['url']),
        force_refresh=bool(data.get('force_refresh', False))
    )
    report = _run(_analyzer().analyze(analysis_request.url, force_refresh=analysis_request.force_refresh))

    status = 400 if report.error and report.error.startswith('Invalid URL') else 200
    return jsonify(report.to_dict()), status


@api_bp.route('/cache', methods=['GET'])
def cache_stats():
    return jsonify(_analyzer().cache_stats())


@api_bp.route('/cache', methods=['DELETE'])
def clear_cache():
    _analyzer().clear_cache()
    return jsonify({'status': 'cleared'})


@api_bp.route('/report', methods=['POST'])
@limiter.limit(f"{config.rate_limit_per_minute} per minute")
def report_url():
    """
    Escalate a URL.

    Request body:
        {
            "url": "https://example.com",
            "category": "phishing",
            "description": "..."
        }
    """
    data = _json_body()
    url = data.get('url')
    if not url:
        raise ValidationError('URL is required')

    record = _run(_reporting().report_url(
        url,
        category=data.get('category') or 'phishing',
        description=data.get('description') or ''
    ))
    return jsonify(record.to_dict()), 201


@api_bp.route('/reports', methods=['GET'])
def list_reports():
    return jsonify([r.to_dict() for r in _reporting().get_history()])


@api_bp.route('/reports', methods=['DELETE'])
def clear_reports():
    _reporting().clear_history()
    return jsonify({'status': 'cleared'})


@api_bp.route('/reports/<report_id>', methods=['GET'])
def get_report(report_id):
    record = _reporting().get_report(report_id)
    if record is None:
        return jsonify({'error': 'Report not found'}), 404
    return jsonify(record.to_dict())


@api_bp.route('/reports/export', methods=['GET'])
def export_reports():
    fmt = request.args.get('format', 'json')
    body = _reporting().export_reports(fmt)
    mimetype = 'text/csv' if fmt == 'csv' else 'application/json'
    return Response(body, mimetype=mimetype)


@api_bp.route('/reports/stats', methods=['GET'])
def report_statistics():
    return jsonify(_reporting().get_statistics())


@api_bp.route('/info', methods=['GET'])
def api_info():
    """Get API information."""
    return jsonify({
        'name': 'QuishGuard API',
        'version': config.version,
        'endpoints': {
            'health': {'method': 'GET', 'path': '/health', 'description': 'Health check'},
            'check': {
                'method': 'POST',
                'path': '/check',
                'description': 'Analyze a scanned URL',
                'rate_limit': f'{config.rate_limit_per_minute} per minute'
            },
            'cache': {'method': 'GET, DELETE', 'path': '/cache', 'description': 'Cache stats / clear cache'},
            'report': {'method': 'POST', 'path': '/report', 'description': 'Report a suspicious URL'},
            'reports': {'method': 'GET, DELETE', 'path': '/reports', 'description': 'Report history'},
            'export': {'method': 'GET', 'path': '/reports/export?format=json|csv', 'description': 'Export reports'},
            'stats': {'method': 'GET', 'path': '/reports/stats', 'description': 'Report statistics'},
            'info': {'method': 'GET', 'path': '/info', 'description': 'API information'}
        }
    })
