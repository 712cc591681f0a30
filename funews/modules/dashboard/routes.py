"""
Dashboard Routes
================
"""

import logging
from datetime import date, datetime, timedelta

from flask import flash, render_template, request

from ...core.errors import ApiError, friendly_message
from ..accounts.service import AccountService
from ..auth.service import AuthService
from ..auth.utils import admin_required, staff_required
from ..categories.service import CategoryService
from ..news.service import NewsService
from ..tags.service import TagService
from . import dashboard_bp

logger = logging.getLogger(__name__)

RECENT_ARTICLES = 5


def _parse_day(value, default):
    try:
        return datetime.strptime(value, '%Y-%m-%d').date() if value else default
    except ValueError:
        return None


@dashboard_bp.route('/')
@dashboard_bp.route('/dashboard')
@staff_required
def dashboard():
    """Counts and recent articles. Accounts are only counted for admins."""
    is_admin = AuthService.is_admin()
    stats = {'news': 0, 'categories': 0, 'tags': 0, 'accounts': None}
    recent = []
    error = None

    try:
        news = NewsService()
        stats['news'] = news.get_news_count()
        stats['categories'] = len(CategoryService().get_all_categories())
        stats['tags'] = len(TagService().get_all_tags())
        if is_admin:
            stats['accounts'] = len(AccountService().get_all_accounts())
        recent = news.get_latest_news(RECENT_ARTICLES)
    except ApiError as e:
        logger.error(f"Dashboard load failed: {e}")
        error = friendly_message(e)

    return render_template('dashboard/dashboard.html',
                           stats=stats,
                           recent=recent,
                           is_admin=is_admin,
                           error=error)


@dashboard_bp.route('/statistics')
@admin_required
def statistics():
    """Articles created in a date range, grouped by day, category, author and status"""
    today = date.today()
    start = _parse_day(request.args.get('start'), today - timedelta(days=30))
    end = _parse_day(request.args.get('end'), today)

    report = None
    error = None
    if start is None or end is None:
        error = 'Dates must use the YYYY-MM-DD format'
    elif start > end:
        error = 'Start date must be before end date'
    else:
        try:
            report = AccountService().get_statistics_report(start.isoformat(), end.isoformat())
        except ApiError as e:
            error = friendly_message(e)

    if error:
        flash(error, 'error')

    return render_template('dashboard/statistics.html',
                           report=report,
                           start=start.isoformat() if start else request.args.get('start', ''),
                           end=end.isoformat() if end else request.args.get('end', ''),
                           error=error)
