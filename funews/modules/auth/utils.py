from functools import wraps

from authlib.integrations.flask_client import OAuth
from flask import flash, redirect, request, url_for

from ...core.config import get_config_value
from ...core.logging_service import LoggingService
from ...core.models import AccountRole
from .service import AuthService

# OAuth configuration
oauth = OAuth()


def configure_oauth(app):
    """Register the Google provider when client credentials are configured"""
    oauth.init_app(app)

    client_id = app.config.get('GOOGLE_CLIENT_ID') or get_config_value('GOOGLE_CLIENT_ID')
    client_secret = app.config.get('GOOGLE_CLIENT_SECRET') or get_config_value('GOOGLE_CLIENT_SECRET')
    if not client_id or not client_secret:
        return None

    return oauth.register(
        name='google',
        client_id=client_id,
        client_secret=client_secret,
        server_metadata_url='https://accounts.google.com/.well-known/openid-configuration',
        client_kwargs={
            'scope': 'openid email profile'
        }
    )


def current_user():
    return AuthService.get_current_user()


def _redirect_to_login():
    flash('Please sign in to access this page.', 'error')
    return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))


def login_required(f):
    """Decorator to require a signed-in account"""
    @wraps(f)
    def decorated_function(*args, **kwargs):
        if not AuthService.is_authenticated() or current_user() is None:
            return _redirect_to_login()
        return f(*args, **kwargs)
    return decorated_function


def roles_required(*roles):
    """Decorator to require one of the given roles.

    Anonymous visitors go to the login page, signed-in accounts with the
    wrong role go to /unauthorized.
    """
    allowed = {AccountRole(r) for r in roles}

    def decorator(f):
        @wraps(f)
        def decorated_function(*args, **kwargs):
            user = current_user()
            if not AuthService.is_authenticated() or user is None:
                return _redirect_to_login()
            if user['account_role'] not in allowed:
                LoggingService.log_security_event(
                    f"Role {user['account_role'].name} denied for {request.path}",
                    {'account_id': user['account_id']},
                )
                return redirect(url_for('news_public.unauthorized'))
            return f(*args, **kwargs)
        return decorated_function
    return decorator


admin_required = roles_required(AccountRole.Admin)
staff_required = roles_required(AccountRole.Admin, AccountRole.Staff)
lecturer_required = roles_required(AccountRole.Admin, AccountRole.Staff, AccountRole.Lecturer)
