"""
Accounts Module
===============

Admin-only management of system accounts: create, edit, activate or
deactivate, and reset passwords. Accounts are never hard deleted.
"""

from flask import Blueprint

accounts_bp = Blueprint('accounts', __name__, url_prefix='/admin/accounts', template_folder='templates')

from . import routes  # noqa: E402,F401
from .service import AccountService  # noqa: E402

__all__ = ['accounts_bp', 'AccountService']
