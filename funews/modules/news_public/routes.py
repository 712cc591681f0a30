from dataclasses import asdict

from flask import abort, flash, jsonify, render_template, request
from flask_cors import cross_origin

from ...core.config import Config, get_config_value
from ...core.errors import ApiError, friendly_message
from ...core.models import NewsStatus
from ...core.pagination import clamp_page_size, parse_page
from ...core.utils import format_content
from ...core.validation import VALIDATION_RULES, normalize_search_keyword
from ..categories.service import CategoryService
from ..news import pagers
from ..news.pagers import NewsPager
from ..news.service import NewsArticleTagService, NewsService, SearchService
from ..tags.service import TagService
from . import news_public_bp

# Origins allowed to read the JSON feed; comma separated, '*' for any
ALLOWED_ORIGINS = [o.strip() for o in Config.CORS_ORIGINS.split(',') if o.strip()] or '*'


@news_public_bp.app_template_filter('format_content')
def format_content_filter(content):
    return format_content(content)


def _active_categories():
    """Sidebar categories. The page still renders when they fail to load."""
    try:
        return CategoryService().get_active_categories()
    except ApiError as e:
        flash(friendly_message(e), 'error')
        return []


@news_public_bp.route('/')
def home():
    """Homepage: latest and featured articles"""
    service = NewsService()
    latest = pagers.latest_news(int(get_config_value('LATEST_NEWS_LIMIT', 10)), service=service)
    featured = pagers.featured_news(int(get_config_value('FEATURED_NEWS_LIMIT', 5)), service=service)
    return render_template('news_public/home.html',
                           latest=latest,
                           featured=featured,
                           categories=_active_categories())


@news_public_bp.route('/category/<int:category_id>')
def category(category_id):
    """Paginated articles of one category"""
    try:
        current = CategoryService().get_category_by_id(category_id)
    except ApiError as e:
        if e.status == 404:
            abort(404)
        return render_template('news_public/category.html', category=None, pager=None,
                               error=friendly_message(e), categories=[]), 502

    limit = int(get_config_value('CATEGORY_PAGE_SIZE', 12))
    pager = pagers.news_by_category(category_id, parse_page(request.args.get('page')), limit)
    return render_template('news_public/category.html',
                           category=current,
                           pager=pager,
                           error=pager.error,
                           categories=_active_categories())


@news_public_bp.route('/article/<int:news_id>')
def article(news_id):
    """Article detail with related articles from the same category"""
    single = pagers.news_by_id(news_id)
    if single.error and single.news is None:
        return render_template('news_public/article.html', article=None, related=[],
                               error=single.error, categories=[]), 404
    if single.news is None:
        abort(404)

    related = []
    if single.news.category_id:
        related_pager = pagers.news_by_category(single.news.category_id, 1, 4)
        related = [n for n in related_pager.news if n.news_article_id != single.news.news_article_id][:3]

    return render_template('news_public/article.html',
                           article=single.news,
                           related=related,
                           error=None,
                           categories=_active_categories())


def _search_pager(keyword, category_id, page, limit):
    if category_id:
        search = SearchService()

        def fetch(p, size):
            return search.search_all(keyword=keyword, category_id=category_id,
                                     status=NewsStatus.Active, page=p, page_size=size)

        return NewsPager(fetch, limit=limit, page=page, error_message='Failed to search news')
    return pagers.news_search(keyword, page, limit)


@news_public_bp.route('/search')
def search():
    """Keyword search, optionally limited to a category"""
    raw_keyword = request.args.get('q', '')
    keyword = normalize_search_keyword(raw_keyword)
    category_id = request.args.get('category', type=int)
    limit = int(get_config_value('PAGE_SIZE', 10))

    if raw_keyword.strip() and keyword is None:
        flash(f"Please enter at least {VALIDATION_RULES['MIN_SEARCH_LENGTH']} characters", 'error')

    pager = _search_pager(keyword or '', category_id, parse_page(request.args.get('page')), limit)
    return render_template('news_public/search.html',
                           keyword=raw_keyword.strip(),
                           category_id=category_id,
                           pager=pager,
                           error=pager.error,
                           categories=_active_categories())


@news_public_bp.route('/tag/<int:tag_id>')
def tag(tag_id):
    """Articles carrying one tag"""
    error = None
    articles = []
    current = None
    try:
        current = TagService().get_tag_by_id(tag_id)
        articles = NewsArticleTagService().get_articles_by_tag(tag_id)
    except ApiError as e:
        if e.status == 404:
            abort(404)
        error = friendly_message(e)
    return render_template('news_public/tag.html', tag=current, articles=articles, error=error)


@news_public_bp.route('/unauthorized')
def unauthorized():
    return render_template('news_public/unauthorized.html'), 403


# ===== Public JSON feed =====

def _json_error(e):
    status = e.status if e.status and e.status >= 400 else 502
    return jsonify({'error': friendly_message(e)}), status


@news_public_bp.route('/api/news/latest', methods=['GET', 'OPTIONS'])
@cross_origin(origins=ALLOWED_ORIGINS, supports_credentials=False)
def api_latest_news():
    """
    Latest articles as JSON.

    Query params:
        limit: Max articles to return (default LATEST_NEWS_LIMIT, max 100)
    """
    limit = clamp_page_size(request.args.get('limit'), int(get_config_value('LATEST_NEWS_LIMIT', 10)))
    try:
        articles = NewsService().get_latest_news(limit)
    except ApiError as e:
        return _json_error(e)
    return jsonify({
        'success': True,
        'articles': [asdict(a) for a in articles],
        'count': len(articles),
    })


@news_public_bp.route('/api/news/search', methods=['GET', 'OPTIONS'])
@cross_origin(origins=ALLOWED_ORIGINS, supports_credentials=False)
def api_search_news():
    """
    Search articles as JSON.

    Query params:
        q: keyword, 2-100 characters
        page: page number (default 1)
        limit: page size (default PAGE_SIZE, max 100)
    """
    raw_keyword = request.args.get('q', '')
    keyword = normalize_search_keyword(raw_keyword)
    if raw_keyword.strip() and keyword is None:
        return jsonify({'error': f"Keyword must be at least {VALIDATION_RULES['MIN_SEARCH_LENGTH']} characters"}), 400

    limit = clamp_page_size(request.args.get('limit'), int(get_config_value('PAGE_SIZE', 10)))
    pager = pagers.news_search(keyword or '', parse_page(request.args.get('page')), limit)
    if pager.error:
        return jsonify({'error': pager.error}), 502

    return jsonify({
        'success': True,
        'articles': [asdict(a) for a in pager.news],
        'pagination': pager.pagination.to_dict(),
    })
