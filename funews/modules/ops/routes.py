"""
Ops Routes
==========

Public health endpoint and admin ops page.
"""

import platform
import shutil
import time
from datetime import datetime

from flask import jsonify, render_template, request

from ...core.api import ApiClient
from ...core.config import get_config_value
from ...core.errors import ApiError
from ...core.logging_service import LoggingService
from ..auth.utils import admin_required
from . import ops_health_bp, ops_admin_bp
from .service import ODataService

_STARTED_AT = time.time()


# ---------------------------------------------------------------------------
# Helper functions
# ---------------------------------------------------------------------------

def _get_disk_usage():
    """Get disk usage for root partition."""
    try:
        usage = shutil.disk_usage('/')
        return {
            'total_gb': round(usage.total / (1024 ** 3), 1),
            'used_gb': round(usage.used / (1024 ** 3), 1),
            'free_gb': round(usage.free / (1024 ** 3), 1),
            'percent': round((usage.used / usage.total) * 100, 1),
        }
    except OSError as e:
        return {'total_gb': 0, 'used_gb': 0, 'free_gb': 0, 'percent': 0, 'error': str(e)}


def _get_uptime():
    """Uptime of this process."""
    uptime_seconds = time.time() - _STARTED_AT
    days = int(uptime_seconds // 86400)
    hours = int((uptime_seconds % 86400) // 3600)
    minutes = int((uptime_seconds % 3600) // 60)
    return {
        'seconds': round(uptime_seconds),
        'formatted': f'{days}d {hours}h {minutes}m',
        'days': days,
    }


def _check_backend():
    """Fetch the OData service document with a short timeout, unauthenticated."""
    base_url = get_config_value('API_BASE_URL', 'http://localhost:5000')
    client = ApiClient(base_url=base_url, timeout=min(float(get_config_value('API_TIMEOUT', 10)), 5))
    started = time.time()
    try:
        ODataService(client).get_service_document()
        return {
            'reachable': True,
            'base_url': base_url,
            'response_ms': round((time.time() - started) * 1000),
        }
    except ApiError as e:
        return {
            'reachable': False,
            'base_url': base_url,
            'status': e.status,
            'error': e.message,
        }


def _compute_status(disk, backend):
    """Overall status and issues list from disk and backend checks."""
    issues = []
    status = 'ok'

    disk_pct = disk.get('percent', 0)
    if disk_pct >= 90:
        issues.append({'type': 'disk_critical', 'message': f'Disk usage critical: {disk_pct}%'})
        status = 'critical'
    elif disk_pct >= 80:
        issues.append({'type': 'disk_warning', 'message': f'Disk usage high: {disk_pct}%'})
        status = 'warning'

    # Pages degrade to error banners without the backend, so it is not critical
    if not backend.get('reachable'):
        issues.append({'type': 'backend_unreachable',
                       'message': f"Backend API unreachable: {backend.get('error', 'unknown error')}"})
        if status != 'critical':
            status = 'warning'

    return status, issues


def _build_health_response(include_details=False):
    """Build the full health check response dict."""
    disk = _get_disk_usage()
    backend = _check_backend()
    status, issues = _compute_status(disk, backend)

    result = {
        'status': status,
        'timestamp': datetime.now().isoformat(),
        'checks': {
            'disk': disk,
            'backend': backend,
            'uptime': _get_uptime(),
        },
        'issues': issues,
    }

    if include_details:
        result['platform'] = {
            'system': platform.system(),
            'release': platform.release(),
            'python': platform.python_version(),
        }
        result['error_count_1h'] = LoggingService.count_errors_since(hours=1)

    return result, status


# ---------------------------------------------------------------------------
# Public routes (ops_health_bp - no auth)
# ---------------------------------------------------------------------------

@ops_health_bp.route('/')
@ops_health_bp.route('')
def health_check():
    """Public health endpoint for uptime monitors."""
    data, status = _build_health_response()
    code = 503 if status == 'critical' else 200
    return jsonify(data), code


# ---------------------------------------------------------------------------
# Admin routes (ops_admin_bp - Admin role)
# ---------------------------------------------------------------------------

@ops_admin_bp.route('/')
@admin_required
def ops_dashboard():
    """Admin ops page."""
    level = request.args.get('level') or None
    data, status = _build_health_response(include_details=True)
    logs = LoggingService.get_recent_logs(limit=100, level=level)
    return render_template('ops/ops_dashboard.html', health=data, status=status, logs=logs, level=level)


@ops_admin_bp.route('/api/logs')
@admin_required
def api_logs():
    """Recent log entries as JSON."""
    limit = request.args.get('limit', 50, type=int)
    logs = LoggingService.get_recent_logs(limit=min(limit, 200), level=request.args.get('level'))
    return jsonify({'logs': logs, 'count': len(logs)})


@ops_admin_bp.route('/api/logs/cleanup', methods=['POST'])
@admin_required
def api_logs_cleanup():
    """Delete log entries older than `days` (default 30)."""
    days = request.form.get('days', 30, type=int)
    deleted = LoggingService.cleanup_old_logs(days_to_keep=max(days, 1))
    return jsonify({'success': True, 'deleted': deleted})
