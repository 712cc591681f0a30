import logging
from flask import flash, render_template, request, redirect, url_for

from ...core.errors import ApiError, ERROR_MESSAGES, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import AccountRole, account_payload
from ...core.validation import validate_login, validate_register
from . import auth_bp
from .service import AuthService
from .utils import oauth

logger = logging.getLogger(__name__)


def _safe_next(target):
    """Only follow local redirects"""
    if target and target.startswith('/') and not target.startswith(('//', '/\\')):
        return target
    return None


def _landing_for(role):
    if role in (AccountRole.Admin, AccountRole.Staff):
        return url_for('admin.dashboard')
    return url_for('news_public.home')


@auth_bp.route('/login', methods=['GET', 'POST'])
def login():
    """Sign-in page"""
    next_url = _safe_next(request.values.get('next'))

    if request.method == 'GET':
        if AuthService.is_authenticated() and AuthService.get_current_user():
            return redirect(next_url or _landing_for(AuthService.current_role()))
        return render_template('auth/login.html', form={}, errors={}, next=next_url)

    form = {
        'email': request.form.get('email', '').strip(),
        'password': request.form.get('password', ''),
    }
    errors = validate_login(form)
    if errors:
        return render_template('auth/login.html', form=form, errors=errors, next=next_url), 400

    try:
        login_data = AuthService().login(form['email'], form['password'])
    except ApiError as e:
        LoggingService.log_security_event(f"Failed login for {form['email']}", {'status': e.status})
        if e.status in (400, 401):
            flash(e.message or ERROR_MESSAGES['LOGIN_FAILED'], 'error')
        else:
            flash(friendly_message(e), 'error')
        return render_template('auth/login.html', form=form, errors={}, next=next_url), 401

    flash(f'Welcome back, {login_data.account_name}!', 'success')
    return redirect(next_url or _landing_for(login_data.account_role))


@auth_bp.route('/logout', methods=['GET', 'POST'])
def logout():
    AuthService().logout()
    flash('You have been signed out.', 'info')
    return redirect(url_for('news_public.home'))


@auth_bp.route('/register', methods=['GET', 'POST'])
def register():
    """Create a Lecturer account, then send the visitor to sign in"""
    from ..accounts.service import AccountService

    if request.method == 'GET':
        return render_template('auth/register.html', form={}, errors={})

    form = {
        'account_name': request.form.get('account_name', '').strip(),
        'account_email': request.form.get('account_email', '').strip(),
        'account_password': request.form.get('account_password', ''),
        'confirm_password': request.form.get('confirm_password', ''),
    }
    errors = validate_register(form)
    if errors:
        return render_template('auth/register.html', form=form, errors=errors), 400

    try:
        AccountService().create_account(account_payload(
            form['account_name'],
            form['account_email'],
            account_role=AccountRole.Lecturer,
            is_active=True,
            account_password=form['account_password'],
        ))
    except ApiError as e:
        flash(e.message or 'Registration failed. Please try again.', 'error')
        return render_template('auth/register.html', form=form, errors={}), 400

    LoggingService.info('auth', f"Registered account {form['account_email']}")
    flash('Account created! Please sign in.', 'success')
    return redirect(url_for('auth.login'))


@auth_bp.route('/google')
def google_login():
    """Initiate Google sign-in"""
    client = oauth.create_client('google')
    if client is None:
        flash('Google sign-in is not configured', 'error')
        return redirect(url_for('auth.login'))

    redirect_uri = url_for('auth.google_callback', _external=True)
    return client.authorize_redirect(redirect_uri)


@auth_bp.route('/google/callback')
def google_callback():
    """Forward Google's ID token to the backend and sign in with its answer"""
    client = oauth.create_client('google')
    if client is None:
        flash('Google sign-in is not configured', 'error')
        return redirect(url_for('auth.login'))

    token = client.authorize_access_token()
    id_token = (token or {}).get('id_token')
    if not id_token:
        flash('Google did not return an ID token', 'error')
        return redirect(url_for('auth.login'))

    try:
        login_data = AuthService().google_login(id_token)
    except ApiError as e:
        logger.warning(f"Google login rejected: {e}")
        flash(e.message or ERROR_MESSAGES['LOGIN_FAILED'], 'error')
        return redirect(url_for('auth.login'))

    flash(f'Welcome, {login_data.account_name}!', 'success')
    return redirect(_landing_for(login_data.account_role))
