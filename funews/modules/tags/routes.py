from flask import flash, redirect, render_template, request, url_for

from ...core.config import get_config_value
from ...core.errors import ApiError, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import tag_payload
from ...core.pagination import Pagination, parse_page
from ...core.validation import normalize_search_keyword, validate_tag
from ..auth.service import AuthService
from ..auth.utils import staff_required
from ..trash.views import delete_view
from . import tags_bp
from .service import TagService


def _form_data():
    return {
        'tag_name': request.form.get('tag_name', '').strip(),
        'note': request.form.get('note', '').strip(),
    }


def _account_id():
    user = AuthService.get_current_user()
    return user['account_id'] if user else None


@tags_bp.route('/')
@staff_required
def tag_list():
    keyword = normalize_search_keyword(request.args.get('q'))
    error = None
    try:
        service = TagService()
        tags = service.search_tags(keyword) if keyword else service.get_all_tags()
    except ApiError as e:
        tags = []
        error = friendly_message(e)

    pagination = Pagination(len(tags), int(get_config_value('PAGE_SIZE', 10)),
                            parse_page(request.args.get('page')))
    return render_template('tags/tag_list.html',
                           tags=tags[pagination.skip:pagination.skip + pagination.limit],
                           pagination=pagination,
                           keyword=keyword or '',
                           error=error)


@tags_bp.route('/create', methods=['GET', 'POST'])
@staff_required
def create_tag():
    if request.method == 'GET':
        return render_template('tags/tag_form.html', form={}, errors={}, tag=None)

    form = _form_data()
    errors = validate_tag(form)
    if errors:
        return render_template('tags/tag_form.html', form=form, errors=errors, tag=None), 400

    try:
        TagService().create_tag(tag_payload(form['tag_name'], form['note'] or None))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('tags/tag_form.html', form=form, errors={}, tag=None), 400

    LoggingService.log_user_action('tags', f"create tag '{form['tag_name']}'", _account_id())
    flash('Tag created', 'success')
    return redirect(url_for('tags.tag_list'))


@tags_bp.route('/<int:tag_id>/edit', methods=['GET', 'POST'])
@staff_required
def edit_tag(tag_id):
    try:
        tag = TagService().get_tag_by_id(tag_id)
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return redirect(url_for('tags.tag_list'))

    if request.method == 'GET':
        form = {'tag_name': tag.tag_name, 'note': tag.note or ''}
        return render_template('tags/tag_form.html', form=form, errors={}, tag=tag)

    form = _form_data()
    errors = validate_tag(form)
    if errors:
        return render_template('tags/tag_form.html', form=form, errors=errors, tag=tag), 400

    try:
        TagService().update_tag(tag_id, tag_payload(form['tag_name'], form['note'] or None))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('tags/tag_form.html', form=form, errors={}, tag=tag), 400

    LoggingService.log_user_action('tags', f'update tag {tag_id}', _account_id())
    flash('Tag updated', 'success')
    return redirect(url_for('tags.tag_list'))


@tags_bp.route('/<int:tag_id>/delete', methods=['GET', 'POST'])
@staff_required
def delete_tag(tag_id):
    return delete_view(f'Tag #{tag_id}',
                       lambda: TagService().delete_tag(tag_id),
                       url_for('tags.tag_list'))


@tags_bp.route('/<int:tag_id>/hard-delete', methods=['GET', 'POST'])
@staff_required
def hard_delete_tag(tag_id):
    return delete_view(f'Tag #{tag_id}',
                       lambda: TagService().hard_delete_tag(tag_id),
                       url_for('tags.tag_list'),
                       hard=True)
