"""
API Client
==========

Thin wrapper around requests.Session for the FU News backend.
Every failure is raised as ApiError so routes can show one banner style.
"""

import logging
from urllib.parse import urljoin

import requests
from flask import g, has_request_context, session

from .config import get_config_value
from .errors import ApiError
from .logging_service import LoggingService

logger = logging.getLogger(__name__)

# Backend endpoints, matching the backend's swagger definitions
API_ENDPOINTS = {
    'AUTH': {
        'LOGIN': '/api/Auth/login',
        'GOOGLE_LOGIN': '/api/auth/google-login',
        'REFRESH_TOKEN': '/api/Auth/refresh-token',
        'REFRESH_TOKEN_MANUAL': '/api/Auth/refresh-token-manual',
        'REVOKE_TOKEN': '/api/Auth/revoke-token',
        'VALIDATE': '/api/Auth/validate',
        'LOGOUT': '/api/Auth/logout',
        'PROFILE': '/api/Auth/profile',
        'CHECK_AUTH': '/api/Auth/check-auth',
    },
    'CATEGORY': {
        'BASE': '/api/Category',
        'BY_ID': lambda id: f'/api/Category/{id}',
        'HARD_DELETE': lambda id: f'/api/Category/{id}/hard-delete',
        'SUBCATEGORIES': lambda parent_id: f'/api/Category/{parent_id}/subcategories',
        'ROOT': '/api/Category/root',
        'TOGGLE_STATUS': lambda id: f'/api/Category/{id}/toggle-status',
        'TREE': '/api/Category/tree',
    },
    'NEWS_ARTICLE': {
        'BASE': '/api/NewsArticle',
        'BY_ID': lambda id: f'/api/NewsArticle/{id}',
        'HARD_DELETE': lambda id: f'/api/NewsArticle/{id}/hard-delete',
        'STATUS': lambda id: f'/api/NewsArticle/{id}/status',
    },
    'NEWS_ARTICLE_TAG': {
        'ARTICLE_TAGS': lambda article_id: f'/api/NewsArticleTag/article/{article_id}/tags',
        'TAG_ARTICLES': lambda tag_id: f'/api/NewsArticleTag/tag/{tag_id}/articles',
        'BULK_TAGS': lambda article_id: f'/api/NewsArticleTag/article/{article_id}/tags/bulk',
        'REMOVE_TAG': lambda article_id, tag_id: f'/api/NewsArticleTag/article/{article_id}/tags/{tag_id}',
        'POPULAR_TAGS': '/api/NewsArticleTag/statistics/popular-tags',
    },
    'SYSTEM_ACCOUNT': {
        'BASE': '/api/SystemAccount',
        'BY_ID': lambda id: f'/api/SystemAccount/{id}',
        'PROFILE': '/api/SystemAccount/profile',
        'CHANGE_PASSWORD': '/api/SystemAccount/change-password',
        'RESET_PASSWORD': lambda id: f'/api/SystemAccount/{id}/reset-password',
        'TOGGLE_STATUS': lambda id: f'/api/SystemAccount/{id}/toggle-status',
        'STATISTICS': '/api/SystemAccount/statistics',
    },
    'TAG': {
        'BASE': '/api/Tag',
        'BY_ID': lambda id: f'/api/Tag/{id}',
        'HARD_DELETE': lambda id: f'/api/Tag/{id}/hard-delete',
        'RESTORE': lambda id: f'/api/Tag/{id}/restore',
        'SEARCH': '/api/Tag/search',
        'STATISTICS': '/api/Tag/statistics',
        'POPULAR': '/api/Tag/popular',
        'BULK': '/api/Tag/bulk',
    },
    'ODATA': {
        'METADATA': '/odata/$metadata',
        'SERVICE_DOCUMENT': '/odata',
    },
}


class ApiClient:
    """
    HTTP client for the FU News backend.

    Args:
        base_url: Backend root, e.g. http://localhost:5000
        timeout: Request timeout in seconds
        token: Bearer access token sent with every request
        http: Optional requests.Session (tests inject a fake one)
    """

    def __init__(self, base_url='http://localhost:5000', timeout=10, token=None, http=None):
        self.base_url = base_url.rstrip('/') + '/'
        self.timeout = timeout
        self.http = http or requests.Session()
        self.default_headers = {
            'Content-Type': 'application/json',
            'Accept': 'application/json',
        }
        if token:
            self.default_headers['Authorization'] = f'Bearer {token}'

    def set_token(self, token):
        if token:
            self.default_headers['Authorization'] = f'Bearer {token}'
        else:
            self.default_headers.pop('Authorization', None)

    def request(self, endpoint, method='GET', data=None, params=None, headers=None, timeout=None):
        url = urljoin(self.base_url, endpoint.lstrip('/'))

        if params:
            params = {k: v for k, v in params.items() if v is not None}

        request_headers = dict(self.default_headers)
        if headers:
            request_headers.update(headers)

        kwargs = {
            'headers': request_headers,
            'params': params or None,
            'timeout': timeout or self.timeout,
        }
        if data is not None and method != 'GET':
            kwargs['json'] = data

        try:
            response = self.http.request(method, url, **kwargs)
        except requests.Timeout:
            LoggingService.log_api_call('api', endpoint, method, 408)
            raise ApiError('Request timeout', 408)
        except requests.RequestException as e:
            LoggingService.log_api_call('api', endpoint, method, 0, {'error': str(e)})
            raise ApiError(str(e) or 'Network error', 0)

        LoggingService.log_api_call('api', endpoint, method, response.status_code)

        if not response.ok:
            if response.status_code == 401 and has_request_context():
                # Picked up after the request to sign the visitor out
                g.api_unauthorized = True
            try:
                error_data = response.json()
            except ValueError:
                error_data = {'message': 'Unknown error'}
            message = None
            if isinstance(error_data, dict):
                message = error_data.get('message')
            raise ApiError(message or f'HTTP Error: {response.status_code}', response.status_code, error_data)

        if not response.content:
            return None

        content_type = response.headers.get('content-type', '')
        if 'application/json' in content_type:
            return response.json()
        return response.text

    def get(self, endpoint, params=None):
        return self.request(endpoint, method='GET', params=params)

    def post(self, endpoint, data=None):
        return self.request(endpoint, method='POST', data=data)

    def put(self, endpoint, data=None):
        return self.request(endpoint, method='PUT', data=data)

    def patch(self, endpoint, data=None):
        return self.request(endpoint, method='PATCH', data=data)

    def delete(self, endpoint):
        return self.request(endpoint, method='DELETE')


def get_api_client(token=None):
    """Build a client from app config, authenticated as the signed-in account"""
    if token is None and has_request_context():
        token = session.get('access_token')
    return ApiClient(
        base_url=get_config_value('API_BASE_URL', 'http://localhost:5000'),
        timeout=float(get_config_value('API_TIMEOUT', 10)),
        token=token,
    )
