"""
Dashboard Module
================

Admin dashboard for FU News.

Provides:
- Content counts and the most recent articles
- Article statistics report for a date range (Admin only)

This is the landing page other admin modules link back to.
"""

from flask import Blueprint

# Blueprint name is 'admin' so templates can link to url_for('admin.dashboard')
dashboard_bp = Blueprint(
    'admin',
    __name__,
    url_prefix='/admin',
    template_folder='templates'
)

# Import routes after blueprint is created
from . import routes  # noqa: E402,F401

__all__ = ['dashboard_bp']
