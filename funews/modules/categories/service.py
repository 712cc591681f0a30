"""
Category Service
================

Wraps /api/Category. Collections come back in several envelope shapes,
so every list call goes through unwrap_collection.
"""

import logging

from ...core.api import API_ENDPOINTS, get_api_client
from ...core.errors import ApiError, ERROR_MESSAGES
from ...core.models import Category
from ...core.odata import ODataQuery, active_categories, as_params, eq, unwrap_collection, unwrap_single

logger = logging.getLogger(__name__)

CATEGORY = API_ENDPOINTS['CATEGORY']


class CategoryService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def _list(self, endpoint, params=None):
        response = self.client.get(endpoint, params=params)
        return [Category.from_api(c) for c in unwrap_collection(response)]

    def get_all_categories(self):
        return self._list(CATEGORY['BASE'])

    def get_category_by_id(self, category_id):
        response = self.client.get(CATEGORY['BY_ID'](category_id))
        return Category.from_api(unwrap_single(response) or {})

    def create_category(self, payload):
        response = self.client.post(CATEGORY['BASE'], payload)
        data = unwrap_single(response)
        return Category.from_api(data) if isinstance(data, dict) else None

    def update_category(self, category_id, payload):
        response = self.client.put(CATEGORY['BY_ID'](category_id), payload)
        data = unwrap_single(response)
        return Category.from_api(data) if isinstance(data, dict) else None

    def delete_category(self, category_id):
        """Soft delete"""
        self.client.delete(CATEGORY['BY_ID'](category_id))

    def hard_delete_category(self, category_id):
        self.client.delete(CATEGORY['HARD_DELETE'](category_id))

    def get_subcategories(self, parent_id):
        return self._list(CATEGORY['SUBCATEGORIES'](parent_id))

    def get_root_categories(self):
        return self._list(CATEGORY['ROOT'])

    def toggle_category_status(self, category_id):
        response = self.client.patch(CATEGORY['TOGGLE_STATUS'](category_id))
        data = unwrap_single(response)
        return Category.from_api(data) if isinstance(data, dict) else None

    def get_category_tree(self):
        return self._list(CATEGORY['TREE'])

    def get_categories_odata(self, query=None):
        return self._list(CATEGORY['BASE'], as_params(query))

    def get_active_categories(self):
        return self.get_categories_odata(active_categories())

    def can_delete_category(self, category_id):
        """True when no article belongs to the category. Lookup failures count as 'no'."""
        from ..news.service import NewsService
        try:
            articles = NewsService(self.client).get_news_odata(
                ODataQuery().filter(eq('CategoryId', int(category_id)))
            )
            return len(articles) == 0
        except ApiError as e:
            logger.error(f"Error checking if category {category_id} can be deleted: {e}")
            return False

    def delete_category_with_check(self, category_id):
        if not self.can_delete_category(category_id):
            raise ApiError(ERROR_MESSAGES['CATEGORY_HAS_ARTICLES'], 409)
        self.delete_category(category_id)
