"""
News Pagers
===========

A pager owns one paged news listing: it fetches a page, remembers the
total and refuses to move outside [1, total_pages]. Failed fetches leave
an error message and an empty list instead of raising.
"""

import logging

from ...core.errors import ApiError
from ...core.odata import ODataQuery
from ...core.pagination import Pagination
from .service import NewsService

logger = logging.getLogger(__name__)


class NewsPager:
    """
    Args:
        fetch: callable (page, limit) -> (articles, total_count)
        limit: page size
        page: page loaded on construction
        error_message: fallback text when a failure carries no message
    """

    def __init__(self, fetch, limit=10, page=1, error_message='Failed to fetch news', load=True):
        self._fetch = fetch
        self._error_message = error_message
        self.pagination = Pagination(0, limit, page)
        self.news = []
        self.error = None
        if load:
            self._load(self.pagination.current_page)

    def _load(self, page):
        self.error = None
        try:
            articles, total = self._fetch(page, self.pagination.limit)
        except ApiError as e:
            logger.warning(f"{self._error_message}: {e}")
            self.error = e.message or self._error_message
            self.news = []
            return False
        self.news = list(articles)
        self.pagination.total_count = max(int(total), 0)
        self.pagination.current_page = page
        return True

    @property
    def total_count(self):
        return self.pagination.total_count

    @property
    def current_page(self):
        return self.pagination.current_page

    @property
    def limit(self):
        return self.pagination.limit

    @property
    def total_pages(self):
        return self.pagination.total_pages

    @property
    def has_next_page(self):
        return self.pagination.has_next_page

    @property
    def has_prev_page(self):
        return self.pagination.has_prev_page

    def window(self, sibling_count=1):
        return self.pagination.window(sibling_count)

    def go_to_page(self, page):
        if 1 <= page <= self.total_pages:
            return self._load(page)
        return False

    def next_page(self):
        if self.has_next_page:
            return self.go_to_page(self.current_page + 1)
        return False

    def prev_page(self):
        if self.has_prev_page:
            return self.go_to_page(self.current_page - 1)
        return False

    def refresh(self):
        return self._load(self.current_page)


class SingleNews:
    """Holds one article (or None) and the error from loading it"""

    def __init__(self, fetch, news_id):
        self._fetch = fetch
        self.news_id = news_id
        self.news = None
        self.error = None
        if news_id and int(news_id) > 0:
            self.refresh()

    def refresh(self):
        self.error = None
        try:
            self.news = self._fetch(self.news_id)
        except ApiError as e:
            logger.warning(f"Failed to fetch news article {self.news_id}: {e}")
            self.error = e.message or 'Failed to fetch news article'
            self.news = None
        return self.news is not None


def latest_news(limit=10, service=None):
    service = service or NewsService()

    def fetch(page, size):
        articles = service.get_latest_news(size)
        return articles, len(articles)

    return NewsPager(fetch, limit=limit)


def featured_news(limit=5, service=None):
    service = service or NewsService()

    def fetch(page, size):
        articles = service.get_featured_news(size)
        return articles, len(articles)

    return NewsPager(fetch, limit=limit, error_message='Failed to fetch featured news')


def news_by_category(category_id, page=1, limit=10, service=None):
    service = service or NewsService()

    def fetch(page, size):
        return service.get_news_by_category(category_id, page, size)

    return NewsPager(fetch, limit=limit, page=page)


def news_search(keyword, page=1, limit=10, service=None):
    """Search pager. A blank keyword yields an empty first page without an API call."""
    keyword = (keyword or '').strip()
    if not keyword:
        return NewsPager(lambda page, size: ([], 0), limit=limit, page=1, load=False)

    service = service or NewsService()

    def fetch(page, size):
        return service.search_news(keyword, page, size)

    return NewsPager(fetch, limit=limit, page=page, error_message='Failed to search news')


def all_news_admin(page=1, limit=10, service=None):
    """Every article regardless of status, newest first"""
    service = service or NewsService()

    def fetch(page, size):
        query = ODataQuery().order_by('CreatedDate', desc=True).page(page, size).count()
        return service.query_news(query)

    return NewsPager(fetch, limit=limit, page=page)


def news_by_id(news_id, service=None):
    service = service or NewsService()
    return SingleNews(service.get_news_by_id, news_id)
