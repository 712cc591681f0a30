import logging
from flask import flash, redirect, render_template, request, session, url_for

from ...core.errors import ApiError, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import SystemAccount
from ...core.validation import password_strength, validate_account, validate_change_password
from ..accounts.service import AccountService
from ..auth.service import AuthService
from ..auth.utils import login_required
from . import profile_bp

logger = logging.getLogger(__name__)

ACTIVITY_LIMIT = 5


def _session_account():
    user = AuthService.get_current_user()
    return SystemAccount(
        account_id=user['account_id'],
        account_name=user['account_name'],
        account_email=user['account_email'],
        account_role=user['account_role'],
    )


@profile_bp.route('/')
@login_required
def profile():
    """Profile card and the account's latest articles"""
    service = AccountService()
    error = None
    try:
        account = service.get_profile() or _session_account()
    except ApiError as e:
        logger.warning(f"Profile fetch failed, using session data: {e}")
        account = _session_account()
        error = friendly_message(e)

    try:
        activity = service.get_news_created_by_account(account.account_id)[:ACTIVITY_LIMIT]
    except ApiError as e:
        logger.warning(f"Activity feed failed: {e}")
        activity = []

    return render_template('profile/profile.html', account=account, activity=activity, error=error)


@profile_bp.route('/edit', methods=['GET', 'POST'])
@login_required
def edit_profile():
    account = _session_account()
    if request.method == 'GET':
        form = {'account_name': account.account_name, 'account_email': account.account_email}
        return render_template('profile/profile_edit.html', form=form, errors={})

    form = {
        'account_name': request.form.get('account_name', '').strip(),
        'account_email': request.form.get('account_email', '').strip(),
    }
    errors = validate_account(form, is_new=False)
    if errors:
        return render_template('profile/profile_edit.html', form=form, errors=errors), 400

    try:
        AccountService().update_profile(form['account_name'], form['account_email'])
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('profile/profile_edit.html', form=form, errors={}), 400

    session['account_name'] = form['account_name']
    session['account_email'] = form['account_email']
    flash('Profile updated', 'success')
    return redirect(url_for('profile.profile'))


@profile_bp.route('/password', methods=['GET', 'POST'])
@login_required
def change_password():
    if request.method == 'GET':
        return render_template('profile/change_password.html', errors={}, strength=None)

    form = {
        'old_password': request.form.get('old_password', ''),
        'new_password': request.form.get('new_password', ''),
        'confirm_password': request.form.get('confirm_password', ''),
    }
    errors = validate_change_password(form)
    strength = password_strength(form['new_password'])
    if errors:
        return render_template('profile/change_password.html', errors=errors, strength=strength), 400

    try:
        AccountService().change_password(form['old_password'], form['new_password'], form['confirm_password'])
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('profile/change_password.html', errors={}, strength=strength), 400

    LoggingService.log_security_event('Password changed', {'account_id': session.get('account_id')})
    flash('Password changed successfully', 'success')
    return redirect(url_for('profile.profile'))
