"""
FU News Errors
==============

Exceptions shared by the API client, services and routes.
"""

# Friendly messages shown in banners, keyed by HTTP status
ERROR_MESSAGES = {
    'VALIDATION_ERROR': 'Invalid data submitted',
    'UNAUTHORIZED': 'Please sign in',
    'FORBIDDEN': 'You do not have permission to perform this action',
    'NOT_FOUND': 'The requested data was not found',
    'SERVER_ERROR': 'System error. Please try again later.',
    'LOGIN_FAILED': 'Incorrect login credentials',
    'CATEGORY_HAS_ARTICLES': 'Cannot delete category: Category has news articles',
    'ACCOUNT_HAS_ARTICLES': 'Cannot delete account: Account has created news articles',
    'HARD_DELETE_FORBIDDEN': 'Only admins can permanently delete items',
}


class ApiError(Exception):
    """Error raised for any failed call to the backend API.

    Args:
        message: Human readable message (from the response body when present)
        status: HTTP status code, 408 for timeouts, 0 for network failures
        data: Decoded error body, if any
    """

    def __init__(self, message, status, data=None):
        super().__init__(message)
        self.message = message
        self.status = status
        self.data = data

    def __repr__(self):
        return f"ApiError(status={self.status}, message={self.message!r})"


class TrashError(Exception):
    """Raised for trash operations the backend does not support"""


def friendly_message(error):
    """Map an ApiError to the message shown to users"""
    status = getattr(error, 'status', None)
    if status == 400:
        return ERROR_MESSAGES['VALIDATION_ERROR']
    if status == 401:
        return ERROR_MESSAGES['UNAUTHORIZED']
    if status == 403:
        return ERROR_MESSAGES['FORBIDDEN']
    if status == 404:
        return ERROR_MESSAGES['NOT_FOUND']
    if status in (0, 408):
        return str(error)
    return ERROR_MESSAGES['SERVER_ERROR']
