"""
News Public Module
==================

Public-facing pages of the site: home, category listings, article
detail, search, tag listings and the JSON feed used by other sites.
"""

from flask import Blueprint

news_public_bp = Blueprint('news_public', __name__, template_folder='templates')

from . import routes  # noqa: E402,F401

__all__ = ['news_public_bp']
