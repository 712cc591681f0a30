"""
FU News Core
============

Shared configuration, API access and helpers for FU News modules.
"""

from .config import Config, get_config_value
from .errors import ApiError, TrashError, friendly_message
from .api import ApiClient, API_ENDPOINTS, get_api_client
from .logging_service import LoggingService

__all__ = [
    'Config', 'get_config_value',
    'ApiError', 'TrashError', 'friendly_message',
    'ApiClient', 'API_ENDPOINTS', 'get_api_client',
    'LoggingService',
]
