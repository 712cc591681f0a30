"""
Ops Module
==========

Health monitoring for the front-end and its backend API.

Features:
- Public /health endpoint for uptime monitors (no auth)
- Admin page with disk usage, backend reachability and the recent log feed

Usage:
    from funews.modules.ops import ops_health_bp, ops_admin_bp

    app.register_blueprint(ops_health_bp)  # Registers at /health
    app.register_blueprint(ops_admin_bp)   # Registers at /admin/ops
"""

from flask import Blueprint

# Public health endpoint (no auth, for uptime monitors)
ops_health_bp = Blueprint(
    'ops_health',
    __name__,
    url_prefix='/health'
)

# Admin ops page (Admin role)
ops_admin_bp = Blueprint(
    'ops_admin',
    __name__,
    url_prefix='/admin/ops',
    template_folder='templates'
)

from . import routes  # noqa: E402,F401
from .service import ODataService  # noqa: E402

__all__ = ['ops_health_bp', 'ops_admin_bp', 'ODataService']
