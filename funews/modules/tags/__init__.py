"""
Tags Module
===========

Admin management of article tags.
"""

from flask import Blueprint

tags_bp = Blueprint('tags', __name__, url_prefix='/admin/tags', template_folder='templates')

from . import routes  # noqa: E402,F401
from .service import TagService  # noqa: E402

__all__ = ['tags_bp', 'TagService']
