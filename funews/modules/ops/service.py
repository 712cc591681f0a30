from ...core.api import API_ENDPOINTS, get_api_client

ODATA = API_ENDPOINTS['ODATA']


class ODataService:
    """OData service document and $metadata"""

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def get_metadata(self):
        return self.client.get(ODATA['METADATA'])

    def get_service_document(self):
        return self.client.get(ODATA['SERVICE_DOCUMENT'])
