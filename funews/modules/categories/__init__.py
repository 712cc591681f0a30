"""
Categories Module
=================

Admin management of article categories (with one level of parents).
"""

from flask import Blueprint

categories_bp = Blueprint('categories', __name__, url_prefix='/admin/categories', template_folder='templates')

from . import routes  # noqa: E402,F401
from .service import CategoryService  # noqa: E402

__all__ = ['categories_bp', 'CategoryService']
