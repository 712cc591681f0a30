"""
Confirm-then-delete view shared by the admin lists.

GET renders a confirmation page, POST with confirm=yes runs the delete
through DeleteWorkflow and redirects back with a flash message.
"""

from flask import flash, redirect, render_template, request

from ...core.errors import ERROR_MESSAGES
from ..auth.service import AuthService
from .deletion import CANCELLED, DeleteWorkflow


def delete_view(item_label, delete_fn, back_url, hard=False):
    workflow = DeleteWorkflow(AuthService.current_role())

    if request.method == 'GET':
        if hard and not workflow.is_admin:
            flash(ERROR_MESSAGES['HARD_DELETE_FORBIDDEN'], 'error')
            return redirect(back_url)
        return render_template('layout/confirm_delete.html',
                               item_label=item_label,
                               hard=hard,
                               back_url=back_url)

    confirmed = request.form.get('confirm') == 'yes'
    if hard:
        result = workflow.execute_hard_delete(delete_fn, confirmed)
    else:
        result = workflow.execute_delete(delete_fn, confirmed)

    if result.ok:
        flash(f"{item_label} {'permanently deleted' if hard else 'moved to trash'}", 'success')
    elif result.status == CANCELLED:
        flash('Delete cancelled', 'info')
    else:
        flash(result.error, 'error')
    return redirect(back_url)
