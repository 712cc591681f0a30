from flask import flash, redirect, render_template, request, url_for

from ...core.config import get_config_value
from ...core.errors import ApiError, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import category_payload
from ...core.pagination import Pagination, parse_page
from ...core.validation import validate_category
from ..auth.service import AuthService
from ..auth.utils import staff_required
from ..trash.views import delete_view
from . import categories_bp
from .service import CategoryService


def _form_data():
    parent = request.form.get('parent_category_id', '').strip()
    return {
        'category_name': request.form.get('category_name', '').strip(),
        'category_description': request.form.get('category_description', '').strip(),
        'parent_category_id': int(parent) if parent.isdecimal() else None,
        'is_active': request.form.get('is_active') in ('on', 'true', '1'),
    }


def _payload(form):
    return category_payload(
        form['category_name'],
        form['category_description'] or None,
        form['parent_category_id'],
        is_active=form['is_active'],
    )


def _parents(exclude_id=None):
    try:
        roots = CategoryService().get_root_categories()
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return []
    return [c for c in roots if c.category_id != exclude_id]


def _account_id():
    user = AuthService.get_current_user()
    return user['account_id'] if user else None


@categories_bp.route('/')
@staff_required
def category_list():
    keyword = request.args.get('q', '').strip()
    error = None
    try:
        categories = CategoryService().get_all_categories()
    except ApiError as e:
        categories = []
        error = friendly_message(e)

    if keyword:
        categories = [c for c in categories if keyword.lower() in c.category_name.lower()]

    pagination = Pagination(len(categories), int(get_config_value('PAGE_SIZE', 10)),
                            parse_page(request.args.get('page')))
    page_items = categories[pagination.skip:pagination.skip + pagination.limit]
    names = {c.category_id: c.category_name for c in categories}

    return render_template('categories/category_list.html',
                           categories=page_items,
                           parent_names=names,
                           pagination=pagination,
                           keyword=keyword,
                           error=error)


@categories_bp.route('/create', methods=['GET', 'POST'])
@staff_required
def create_category():
    parents = _parents()
    if request.method == 'GET':
        return render_template('categories/category_form.html', form={'is_active': True}, errors={},
                               category=None, parents=parents)

    form = _form_data()
    errors = validate_category(form)
    if errors:
        return render_template('categories/category_form.html', form=form, errors=errors,
                               category=None, parents=parents), 400

    try:
        CategoryService().create_category(_payload(form))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('categories/category_form.html', form=form, errors={},
                               category=None, parents=parents), 400

    LoggingService.log_user_action('categories', f"create category '{form['category_name']}'", _account_id())
    flash('Category created', 'success')
    return redirect(url_for('categories.category_list'))


@categories_bp.route('/<int:category_id>/edit', methods=['GET', 'POST'])
@staff_required
def edit_category(category_id):
    try:
        category = CategoryService().get_category_by_id(category_id)
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return redirect(url_for('categories.category_list'))

    parents = _parents(exclude_id=category_id)
    if request.method == 'GET':
        form = {
            'category_name': category.category_name,
            'category_description': category.category_description or '',
            'parent_category_id': category.parent_category_id,
            'is_active': category.is_active,
        }
        return render_template('categories/category_form.html', form=form, errors={},
                               category=category, parents=parents)

    form = _form_data()
    errors = validate_category(form)
    if errors:
        return render_template('categories/category_form.html', form=form, errors=errors,
                               category=category, parents=parents), 400

    try:
        CategoryService().update_category(category_id, _payload(form))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('categories/category_form.html', form=form, errors={},
                               category=category, parents=parents), 400

    LoggingService.log_user_action('categories', f'update category {category_id}', _account_id())
    flash('Category updated', 'success')
    return redirect(url_for('categories.category_list'))


@categories_bp.route('/<int:category_id>/toggle', methods=['POST'])
@staff_required
def toggle_category(category_id):
    try:
        CategoryService().toggle_category_status(category_id)
        flash('Category status updated', 'success')
    except ApiError as e:
        flash(friendly_message(e), 'error')
    return redirect(url_for('categories.category_list'))


@categories_bp.route('/<int:category_id>/delete', methods=['GET', 'POST'])
@staff_required
def delete_category(category_id):
    return delete_view(f'Category #{category_id}',
                       lambda: CategoryService().delete_category_with_check(category_id),
                       url_for('categories.category_list'))


@categories_bp.route('/<int:category_id>/hard-delete', methods=['GET', 'POST'])
@staff_required
def hard_delete_category(category_id):
    return delete_view(f'Category #{category_id}',
                       lambda: CategoryService().hard_delete_category(category_id),
                       url_for('categories.category_list'),
                       hard=True)
