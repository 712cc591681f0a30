"""
News Admin Routes
=================

Article management for Staff and Admin accounts.
"""

import logging
from flask import flash, redirect, render_template, request, url_for

from ...core.config import get_config_value
from ...core.errors import ApiError, friendly_message
from ...core.logging_service import LoggingService
from ...core.models import NewsStatus, news_article_payload, parse_status
from ...core.pagination import parse_page
from ...core.validation import validate_article
from ..auth.service import AuthService
from ..auth.utils import staff_required
from ..categories.service import CategoryService
from ..tags.service import TagService
from ..trash.views import delete_view
from . import news_bp
from . import pagers
from .pagers import NewsPager
from .service import NewsService, NewsArticleTagService, SearchService

logger = logging.getLogger(__name__)


def _form_data():
    """Article form fields as submitted"""
    return {
        'news_title': request.form.get('news_title', '').strip(),
        'headline': request.form.get('headline', '').strip(),
        'news_content': request.form.get('news_content', ''),
        'news_source': request.form.get('news_source', '').strip(),
        'category_id': request.form.get('category_id', '').strip(),
        'news_status': request.form.get('news_status', str(int(NewsStatus.Active))),
        'tag_ids': [t for t in request.form.getlist('tag_ids') if t.isdecimal()],
    }


def _payload(form):
    return news_article_payload(
        form['news_title'],
        form['news_content'],
        form['category_id'],
        news_status=parse_status(form['news_status']),
        headline=form['headline'] or None,
        news_source=form['news_source'] or None,
        tag_ids=form['tag_ids'],
    )


def _form_options():
    """Categories and tags for the select boxes"""
    try:
        categories = CategoryService().get_active_categories()
        tags = TagService().get_all_tags()
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return [], []
    return categories, tags


def _account_id():
    user = AuthService.get_current_user()
    return user['account_id'] if user else None


@news_bp.route('/')
@staff_required
def news_list():
    """All articles, newest first, with optional filters"""
    keyword = request.args.get('q', '').strip()
    category_id = request.args.get('category', type=int)
    status = request.args.get('status', type=int)
    page = parse_page(request.args.get('page'))
    limit = int(get_config_value('PAGE_SIZE', 10))

    if keyword or category_id or status is not None:
        search = SearchService()

        def fetch(p, size):
            return search.search_all(keyword=keyword or None, category_id=category_id,
                                     status=status, page=p, page_size=size)

        pager = NewsPager(fetch, limit=limit, page=page)
    else:
        pager = pagers.all_news_admin(page, limit)

    categories, _ = _form_options()
    return render_template('news/news_list.html',
                           pager=pager,
                           error=pager.error,
                           keyword=keyword,
                           category_id=category_id,
                           status=status,
                           categories=categories)


@news_bp.route('/create', methods=['GET', 'POST'])
@staff_required
def create_news():
    categories, tags = _form_options()

    if request.method == 'GET':
        return render_template('news/news_form.html', form={}, errors={}, article=None,
                               categories=categories, tags=tags)

    form = _form_data()
    errors = validate_article(form)
    if errors:
        return render_template('news/news_form.html', form=form, errors=errors, article=None,
                               categories=categories, tags=tags), 400

    try:
        created = NewsService().create_news(_payload(form))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('news/news_form.html', form=form, errors={}, article=None,
                               categories=categories, tags=tags), 400

    LoggingService.log_user_action('news', f"create article '{form['news_title']}'", _account_id())
    flash('Article created', 'success')
    if created and created.news_article_id:
        return redirect(url_for('news_admin.edit_news', news_id=created.news_article_id))
    return redirect(url_for('news_admin.news_list'))


@news_bp.route('/<int:news_id>/edit', methods=['GET', 'POST'])
@staff_required
def edit_news(news_id):
    single = pagers.news_by_id(news_id)
    if single.news is None:
        flash(single.error or 'Article not found', 'error')
        return redirect(url_for('news_admin.news_list'))

    article = single.news
    categories, tags = _form_options()

    if request.method == 'GET':
        form = {
            'news_title': article.news_title,
            'headline': article.headline or '',
            'news_content': article.news_content or '',
            'news_source': article.news_source or '',
            'category_id': str(article.category_id or ''),
            'news_status': str(int(article.news_status)),
            'tag_ids': [str(t.tag_id) for t in article.tags],
        }
        return render_template('news/news_form.html', form=form, errors={}, article=article,
                               categories=categories, tags=tags)

    form = _form_data()
    errors = validate_article(form)
    if errors:
        return render_template('news/news_form.html', form=form, errors=errors, article=article,
                               categories=categories, tags=tags), 400

    try:
        NewsService().update_news(news_id, _payload(form))
    except ApiError as e:
        flash(e.message or friendly_message(e), 'error')
        return render_template('news/news_form.html', form=form, errors={}, article=article,
                               categories=categories, tags=tags), 400

    LoggingService.log_user_action('news', f'update article {news_id}', _account_id())
    flash('Article updated', 'success')
    return redirect(url_for('news_admin.news_list'))


@news_bp.route('/<int:news_id>/status', methods=['POST'])
@staff_required
def change_status(news_id):
    """Set the status given in the form (Active or Inactive)"""
    status = parse_status(request.form.get('status', ''))
    try:
        NewsService().change_news_status(news_id, status)
        flash(f'Article marked {status.name}', 'success')
    except ApiError as e:
        flash(friendly_message(e), 'error')
    return redirect(request.referrer or url_for('news_admin.news_list'))


@news_bp.route('/<int:news_id>/tags/<int:tag_id>/remove', methods=['POST'])
@staff_required
def remove_tag(news_id, tag_id):
    try:
        NewsArticleTagService().remove_tag_from_article(news_id, tag_id)
        flash('Tag removed from article', 'success')
    except ApiError as e:
        flash(friendly_message(e), 'error')
    return redirect(url_for('news_admin.edit_news', news_id=news_id))


@news_bp.route('/<int:news_id>/delete', methods=['GET', 'POST'])
@staff_required
def delete_news(news_id):
    return delete_view(f'Article #{news_id}',
                       lambda: NewsService().delete_news(news_id),
                       url_for('news_admin.news_list'))


@news_bp.route('/<int:news_id>/hard-delete', methods=['GET', 'POST'])
@staff_required
def hard_delete_news(news_id):
    return delete_view(f'Article #{news_id}',
                       lambda: NewsService().hard_delete_news(news_id),
                       url_for('news_admin.news_list'),
                       hard=True)
