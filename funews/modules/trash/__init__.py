"""
Trash Module
============

Soft-deleted news, categories, tags and deactivated accounts in one
place, with restore and permanent delete.
"""

from flask import Blueprint

trash_bp = Blueprint('trash', __name__, url_prefix='/admin/trash', template_folder='templates')

from . import routes  # noqa: E402,F401
from .deletion import DeleteWorkflow, DeleteResult  # noqa: E402
from .service import TrashService  # noqa: E402

__all__ = ['trash_bp', 'DeleteWorkflow', 'DeleteResult', 'TrashService']
