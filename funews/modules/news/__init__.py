"""
News Admin Module
=================

Admin interface for news article management.
Plugs into the admin dashboard module.

Provides:
- Article list with keyword, category and status filters
- Article creation and editing with tags
- Active/Inactive status toggle
- Soft delete to the trash, hard delete for admins
"""

from flask import Blueprint

news_bp = Blueprint(
    'news_admin',
    __name__,
    url_prefix='/admin/news',
    template_folder='templates'
)

from . import routes  # noqa: E402,F401
from .service import NewsService, NewsArticleTagService, SearchService  # noqa: E402

__all__ = ['news_bp', 'NewsService', 'NewsArticleTagService', 'SearchService']
