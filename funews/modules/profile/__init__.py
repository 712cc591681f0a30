"""
Profile Module
==============

The signed-in account's own profile: details, recent articles and
password change. Open to every role.
"""

from flask import Blueprint

profile_bp = Blueprint('profile', __name__, url_prefix='/profile', template_folder='templates')

from . import routes  # noqa: E402,F401

__all__ = ['profile_bp']
