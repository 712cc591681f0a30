import logging
from flask import flash, redirect, render_template, request, url_for

from ...core.errors import ApiError, TrashError, ERROR_MESSAGES, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import TRASH_TYPES
from ..auth.service import AuthService
from ..auth.utils import admin_required, staff_required
from . import trash_bp
from .deletion import DeleteWorkflow
from .service import TrashService

logger = logging.getLogger(__name__)


def _confirmed():
    return request.form.get('confirm') == 'yes'


@trash_bp.route('/')
@staff_required
def trash_list():
    role = AuthService.current_role()
    item_type = request.args.get('type')
    if item_type not in TRASH_TYPES:
        item_type = None

    service = TrashService()
    items = service.get_trash_items(role)
    statistics = service.get_trash_statistics(items=items)
    if item_type:
        items = [i for i in items if i.type == item_type]

    return render_template('trash/trash.html',
                           items=items,
                           statistics=statistics,
                           item_type=item_type,
                           is_admin=AuthService.is_admin())


@trash_bp.route('/<item_type>/<int:item_id>/restore', methods=['POST'])
@staff_required
def restore(item_type, item_id):
    service = TrashService()
    item = service.find_item(item_type, item_id, AuthService.current_role())
    if item is None:
        flash('Item is no longer in the trash', 'error')
        return redirect(url_for('trash.trash_list'))

    try:
        service.restore_item(item)
    except (ApiError, TrashError) as e:
        flash(friendly_message(e) if isinstance(e, ApiError) else str(e), 'error')
        return redirect(url_for('trash.trash_list'))

    LoggingService.log_user_action('trash', f'restore {item.type} {item.id}', AuthService.get_current_user()['account_id'])
    flash(f'"{item.title}" restored', 'success')
    return redirect(url_for('trash.trash_list'))


@trash_bp.route('/<item_type>/<int:item_id>/delete', methods=['POST'])
@staff_required
def permanent_delete(item_type, item_id):
    service = TrashService()
    workflow = DeleteWorkflow(AuthService.current_role(), trash=service)
    if not workflow.is_admin:
        flash(ERROR_MESSAGES['HARD_DELETE_FORBIDDEN'], 'error')
        return redirect(url_for('trash.trash_list'))

    item = service.find_item(item_type, item_id, AuthService.current_role())
    if item is None:
        flash('Item is no longer in the trash', 'error')
        return redirect(url_for('trash.trash_list'))

    result = workflow.execute_hard_delete(lambda: service.permanent_delete(item), _confirmed())
    if result.ok:
        flash(f'"{item.title}" permanently deleted', 'success')
    elif result.error:
        flash(result.error, 'error')
    else:
        flash('Delete cancelled', 'info')
    return redirect(url_for('trash.trash_list'))


@trash_bp.route('/empty', methods=['GET', 'POST'])
@admin_required
def empty_trash():
    if request.method == 'GET':
        return render_template('layout/confirm_delete.html',
                               item_label='Every item in the trash',
                               hard=True,
                               back_url=url_for('trash.trash_list'))

    if not _confirmed():
        flash('Delete cancelled', 'info')
        return redirect(url_for('trash.trash_list'))

    try:
        removed = TrashService().empty_trash(AuthService.current_role())
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return redirect(url_for('trash.trash_list'))

    LoggingService.log_user_action('trash', 'empty trash', AuthService.get_current_user()['account_id'],
                                   {'removed': removed})
    flash(f'Trash emptied ({removed} items permanently deleted)', 'success')
    return redirect(url_for('trash.trash_list'))
