"""
FU News Auth Module

Provides:
- Email/password login against the backend
- Registration of Staff accounts
- Google sign-in (ID token forwarded to the backend)
- Role-based route guards
"""

from flask import Blueprint

auth_bp = Blueprint('auth', __name__, url_prefix='/auth', template_folder='templates')

from . import routes  # noqa: E402,F401
from .service import AuthService, TokenStore  # noqa: E402
from .utils import (  # noqa: E402
    configure_oauth, oauth, login_required, roles_required,
    admin_required, staff_required, lecturer_required, current_user,
)

__all__ = ['auth_bp', 'AuthService', 'TokenStore', 'configure_oauth', 'oauth',
           'login_required', 'roles_required', 'admin_required', 'staff_required',
           'lecturer_required', 'current_user']
