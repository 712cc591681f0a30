"""
Tag Service
===========

Wraps /api/Tag, including the restore endpoint used by the trash screen.
"""

from ...core.api import API_ENDPOINTS, get_api_client
from ...core.models import Tag
from ...core.odata import as_params, unwrap_collection, unwrap_single

TAG = API_ENDPOINTS['TAG']


def _tag(response):
    data = unwrap_single(response)
    return Tag.from_api(data) if isinstance(data, dict) else None


class TagService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def _list(self, endpoint, params=None):
        response = self.client.get(endpoint, params=params)
        return [Tag.from_api(t) for t in unwrap_collection(response)]

    def get_all_tags(self):
        return self._list(TAG['BASE'])

    def get_tag_by_id(self, tag_id):
        return _tag(self.client.get(TAG['BY_ID'](tag_id)))

    def create_tag(self, payload):
        return _tag(self.client.post(TAG['BASE'], payload))

    def update_tag(self, tag_id, payload):
        return _tag(self.client.put(TAG['BY_ID'](tag_id), payload))

    def delete_tag(self, tag_id):
        """Soft delete"""
        self.client.delete(TAG['BY_ID'](tag_id))

    def hard_delete_tag(self, tag_id):
        self.client.delete(TAG['HARD_DELETE'](tag_id))

    def restore_tag(self, tag_id):
        return _tag(self.client.patch(TAG['RESTORE'](tag_id)))

    def search_tags(self, keyword):
        return self._list(TAG['SEARCH'], {'keyword': keyword})

    def get_tag_statistics(self):
        return unwrap_single(self.client.get(TAG['STATISTICS']))

    def get_popular_tags(self, limit=10):
        return self._list(TAG['POPULAR'], {'limit': limit})

    def create_bulk_tags(self, tag_names):
        response = self.client.post(TAG['BULK'], {'tagNames': list(tag_names)})
        return [Tag.from_api(t) for t in unwrap_collection(response)]

    def get_tags_odata(self, query=None):
        return self._list(TAG['BASE'], as_params(query))
