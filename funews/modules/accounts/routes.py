from flask import flash, redirect, render_template, request, url_for

from ...core.config import get_config_value
from ...core.errors import ApiError, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import AccountRole, account_payload, parse_role
from ...core.pagination import Pagination, parse_page
from ...core.validation import validate_account
from ..auth.service import AuthService
from ..auth.utils import admin_required
from ..trash.views import delete_view
from . import accounts_bp
from .service import AccountService

ROLE_CHOICES = list(AccountRole)


def _form_data():
    return {
        'account_name': request.form.get('account_name', '').strip(),
        'account_email': request.form.get('account_email', '').strip(),
        'account_password': request.form.get('account_password', ''),
        'account_role': parse_role(request.form.get('account_role', int(AccountRole.Staff))),
        'is_active': request.form.get('is_active') in ('on', 'true', '1'),
    }


def _admin_id():
    return AuthService.get_current_user()['account_id']


def _render_form(form, errors, account=None, status=200):
    return render_template('accounts/account_form.html',
                           form=form,
                           errors=errors,
                           account=account,
                           roles=ROLE_CHOICES), status


@accounts_bp.route('/')
@admin_required
def account_list():
    keyword = request.args.get('q', '').strip().lower()
    role = request.args.get('role', type=int)
    error = None
    try:
        service = AccountService()
        if role is not None and role in {int(r) for r in AccountRole}:
            accounts = service.get_accounts_by_role(AccountRole(role))
        else:
            accounts = service.get_all_accounts()
    except ApiError as e:
        accounts = []
        error = friendly_message(e)

    if keyword:
        accounts = [a for a in accounts
                    if keyword in a.account_name.lower() or keyword in a.account_email.lower()]

    pagination = Pagination(len(accounts), int(get_config_value('PAGE_SIZE', 10)),
                            parse_page(request.args.get('page')))
    return render_template('accounts/account_list.html',
                           accounts=accounts[pagination.skip:pagination.skip + pagination.limit],
                           pagination=pagination,
                           keyword=keyword,
                           role=role,
                           roles=ROLE_CHOICES,
                           error=error)


@accounts_bp.route('/create', methods=['GET', 'POST'])
@admin_required
def create_account():
    if request.method == 'GET':
        return _render_form({'account_role': AccountRole.Staff, 'is_active': True}, {})

    form = _form_data()
    errors = validate_account(form, is_new=True)
    if errors:
        return _render_form(form, errors, status=400)

    try:
        AccountService().create_account(account_payload(
            form['account_name'],
            form['account_email'],
            account_role=form['account_role'],
            is_active=form['is_active'],
            account_password=form['account_password'],
        ))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return _render_form(form, {}, status=400)

    LoggingService.log_user_action('accounts', f"create account {form['account_email']}", _admin_id())
    flash('Account created', 'success')
    return redirect(url_for('accounts.account_list'))


@accounts_bp.route('/<int:account_id>/edit', methods=['GET', 'POST'])
@admin_required
def edit_account(account_id):
    try:
        account = AccountService().get_account_by_id(account_id)
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return redirect(url_for('accounts.account_list'))

    if request.method == 'GET':
        form = {
            'account_name': account.account_name,
            'account_email': account.account_email,
            'account_role': account.account_role,
            'is_active': account.is_active,
        }
        return _render_form(form, {}, account)

    form = _form_data()
    errors = validate_account(form, is_new=False)
    if errors:
        return _render_form(form, errors, account, status=400)

    try:
        AccountService().update_account(account_id, account_payload(
            form['account_name'],
            form['account_email'],
            account_role=form['account_role'],
            is_active=form['is_active'],
        ))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return _render_form(form, {}, account, status=400)

    LoggingService.log_user_action('accounts', f'update account {account_id}', _admin_id())
    flash('Account updated', 'success')
    return redirect(url_for('accounts.account_list'))


@accounts_bp.route('/<int:account_id>/toggle', methods=['POST'])
@admin_required
def toggle_account(account_id):
    if account_id == _admin_id():
        flash('You cannot deactivate your own account', 'error')
        return redirect(url_for('accounts.account_list'))
    try:
        AccountService().toggle_account_status(account_id)
        flash('Account status updated', 'success')
    except ApiError as e:
        flash(friendly_message(e), 'error')
    return redirect(url_for('accounts.account_list'))


@accounts_bp.route('/<int:account_id>/reset-password', methods=['POST'])
@admin_required
def reset_password(account_id):
    try:
        temporary = AccountService().reset_password(account_id)
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return redirect(url_for('accounts.account_list'))

    LoggingService.log_security_event(f'Password reset for account {account_id}', {'by': _admin_id()})
    flash(f'Password reset. Temporary password: {temporary}', 'success')
    return redirect(url_for('accounts.account_list'))


@accounts_bp.route('/<int:account_id>/delete', methods=['GET', 'POST'])
@admin_required
def delete_account(account_id):
    if account_id == _admin_id():
        flash('You cannot delete your own account', 'error')
        return redirect(url_for('accounts.account_list'))
    return delete_view(f'Account #{account_id}',
                       lambda: AccountService().delete_account(account_id),
                       url_for('accounts.account_list'))
