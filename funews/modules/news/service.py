"""
News Services
=============

NewsService wraps /api/NewsArticle, NewsArticleTagService the article/tag
join endpoints and SearchService the combined admin/public search.
"""

import logging

from ...core.api import API_ENDPOINTS, get_api_client
from ...core.models import NewsArticle, NewsStatus, Tag
from ...core.odata import (
    ODataQuery, active_news_only, as_params, eq, extract_count, keyword_filter, latest_news,
    unwrap_collection, unwrap_single,
)

logger = logging.getLogger(__name__)

NEWS = API_ENDPOINTS['NEWS_ARTICLE']
NEWS_TAG = API_ENDPOINTS['NEWS_ARTICLE_TAG']


def _article(response):
    data = unwrap_single(response)
    return NewsArticle.from_api(data) if isinstance(data, dict) else None


class NewsService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def get_all_news(self):
        response = self.client.get(NEWS['BASE'])
        return [NewsArticle.from_api(n) for n in unwrap_collection(response)]

    def get_news_by_id(self, news_id):
        return _article(self.client.get(NEWS['BY_ID'](news_id)))

    def create_news(self, payload):
        return _article(self.client.post(NEWS['BASE'], payload))

    def update_news(self, news_id, payload):
        return _article(self.client.put(NEWS['BY_ID'](news_id), payload))

    def delete_news(self, news_id):
        """Soft delete"""
        self.client.delete(NEWS['BY_ID'](news_id))

    def hard_delete_news(self, news_id):
        self.client.delete(NEWS['HARD_DELETE'](news_id))

    def change_news_status(self, news_id, status):
        return _article(self.client.patch(NEWS['STATUS'](news_id), {'status': int(status)}))

    def query_news(self, query=None):
        """Run an OData query and return (articles, total_count).

        The total comes from @odata.count when the query asked for it,
        otherwise it is the number of rows returned.
        """
        response = self.client.get(NEWS['BASE'], params=as_params(query))
        articles = [NewsArticle.from_api(n) for n in unwrap_collection(response)]
        return articles, extract_count(response, len(articles))

    def get_news_odata(self, query=None):
        return self.query_news(query)[0]

    def get_latest_news(self, limit=10):
        return self.get_news_odata(latest_news(limit))

    def get_active_news(self):
        return self.get_news_odata(active_news_only())

    def get_featured_news(self, limit=5):
        query = active_news_only().order_by('CreatedDate', desc=True).top(limit)
        return self.get_news_odata(query)

    def get_news_by_category(self, category_id, page=1, limit=10):
        """One page of a category, newest first, with the category's total"""
        query = (ODataQuery()
                 .filter(eq('CategoryId', int(category_id)))
                 .order_by('CreatedDate', desc=True)
                 .page(page, limit)
                 .count())
        return self.query_news(query)

    def search_news(self, keyword, page=1, limit=10):
        query = (ODataQuery()
                 .filter(keyword_filter(keyword))
                 .order_by('CreatedDate', desc=True)
                 .page(page, limit)
                 .count())
        return self.query_news(query)

    def get_news_count(self, category_id=None, keyword=None):
        query = ODataQuery().top(0).count()
        if category_id:
            query.filter(eq('CategoryId', int(category_id)))
        if keyword:
            query.filter(keyword_filter(keyword))
        response = self.client.get(NEWS['BASE'], params=query.to_params())
        return extract_count(response, len(unwrap_collection(response)))


class NewsArticleTagService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def get_article_tags(self, article_id):
        response = self.client.get(NEWS_TAG['ARTICLE_TAGS'](article_id))
        return [Tag.from_api(t) for t in unwrap_collection(response)]

    def add_tag_to_article(self, article_id, tag_id):
        self.client.post(NEWS_TAG['ARTICLE_TAGS'](article_id), {'tagId': int(tag_id)})

    def replace_article_tags(self, article_id, tag_ids):
        self.client.put(NEWS_TAG['ARTICLE_TAGS'](article_id), {'tagIds': [int(t) for t in tag_ids]})

    def get_articles_by_tag(self, tag_id):
        response = self.client.get(NEWS_TAG['TAG_ARTICLES'](tag_id))
        return [NewsArticle.from_api(n) for n in unwrap_collection(response)]

    def add_multiple_tags_to_article(self, article_id, tag_ids):
        self.client.post(NEWS_TAG['BULK_TAGS'](article_id), {'tagIds': [int(t) for t in tag_ids]})

    def remove_tag_from_article(self, article_id, tag_id):
        self.client.delete(NEWS_TAG['REMOVE_TAG'](article_id, tag_id))

    def get_popular_tags(self, limit=10):
        """Tag usage statistics as plain dicts ({tagId, tagName, articleCount})"""
        response = self.client.get(NEWS_TAG['POPULAR_TAGS'], params={'limit': limit})
        return unwrap_collection(response)


class SearchService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def search_all(self, keyword=None, category_id=None, status=None, page=1, page_size=10,
                   sort_by='CreatedDate', sort_direction='desc'):
        """Search articles that are not soft-deleted.

        Returns (articles, total_count).
        """
        query = ODataQuery().filter(eq('IsDeleted', False))
        if keyword:
            query.filter(keyword_filter(keyword))
        if category_id:
            query.filter(eq('CategoryId', int(category_id)))
        if status is not None:
            query.filter(eq('NewsStatus', NewsStatus(int(status))))
        query.order_by(sort_by, desc=(str(sort_direction).lower() == 'desc'))
        query.page(page, page_size).count()
        return NewsService(self.client).query_news(query)
