"""
Auth Service
============

Login, token refresh and logout against the backend Auth endpoints.
Tokens and the signed-in account are kept in the Flask session.
"""

import logging
from flask import session

from ...core.api import API_ENDPOINTS, get_api_client
from ...core.errors import ApiError
from ...core.logging_service import LoggingService
from ...core.models import LoginResponse, SystemAccount, AccountRole, parse_role
from ...core.odata import unwrap_single

logger = logging.getLogger(__name__)

AUTH = API_ENDPOINTS['AUTH']

SESSION_KEYS = ('access_token', 'refresh_token', 'account_role', 'account_name',
                'account_id', 'account_email')


class TokenStore:
    """Session-backed storage for tokens and the current account"""

    @staticmethod
    def save_login(login):
        session['access_token'] = login.access_token
        session['refresh_token'] = login.refresh_token
        session['account_role'] = int(login.account_role)
        session['account_name'] = login.account_name
        session['account_id'] = login.account_id
        session['account_email'] = login.account_email

    @staticmethod
    def save_tokens(access_token, refresh_token=None):
        if access_token:
            session['access_token'] = access_token
        if refresh_token:
            session['refresh_token'] = refresh_token

    @staticmethod
    def access_token():
        return session.get('access_token')

    @staticmethod
    def refresh_token():
        return session.get('refresh_token')

    @staticmethod
    def clear():
        for key in SESSION_KEYS:
            session.pop(key, None)


class AuthService:
    """Wraps /api/Auth/*"""

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def _store_login(self, response):
        login = LoginResponse.from_api(unwrap_single(response) or {})
        TokenStore.save_login(login)
        self.client.set_token(login.access_token)
        return login

    def login(self, email, password):
        response = self.client.post(AUTH['LOGIN'], {'email': email, 'password': password})
        login = self._store_login(response)
        LoggingService.log_user_action('auth', 'login', login.account_id, {'email': email})
        return login

    def google_login(self, id_token):
        response = self.client.post(AUTH['GOOGLE_LOGIN'], {'idToken': id_token})
        login = self._store_login(response)
        LoggingService.log_user_action('auth', 'google_login', login.account_id)
        return login

    def refresh_token(self, refresh_token=None):
        """Exchange the stored refresh token for a new access token"""
        refresh_token = refresh_token or TokenStore.refresh_token()
        response = self.client.post(AUTH['REFRESH_TOKEN'], {'refreshToken': refresh_token})
        data = unwrap_single(response) or {}
        TokenStore.save_tokens(data.get('accessToken'), data.get('refreshToken'))
        self.client.set_token(data.get('accessToken'))
        return data

    def refresh_token_manual(self, access_token, refresh_token):
        response = self.client.post(AUTH['REFRESH_TOKEN_MANUAL'], {
            'accessToken': access_token,
            'refreshToken': refresh_token,
        })
        data = unwrap_single(response) or {}
        TokenStore.save_tokens(data.get('accessToken'), data.get('refreshToken'))
        self.client.set_token(data.get('accessToken'))
        return data

    def revoke_token(self, refresh_token):
        self.client.post(AUTH['REVOKE_TOKEN'], {'refreshToken': refresh_token})

    def validate_token(self):
        try:
            self.client.get(AUTH['VALIDATE'])
            return True
        except ApiError:
            return False

    def check_auth(self):
        try:
            self.client.get(AUTH['CHECK_AUTH'])
            return True
        except ApiError:
            return False

    def get_profile(self):
        response = self.client.get(AUTH['PROFILE'])
        return SystemAccount.from_api(unwrap_single(response) or {})

    def logout(self):
        """Tell the backend, then clear the session whatever it answered"""
        account_id = session.get('account_id')
        try:
            self.client.post(AUTH['LOGOUT'])
        except ApiError as e:
            logger.warning(f"Logout error: {e}")
        finally:
            TokenStore.clear()
            self.client.set_token(None)
        LoggingService.log_user_action('auth', 'logout', account_id)

    @staticmethod
    def is_authenticated():
        return bool(TokenStore.access_token())

    @staticmethod
    def get_current_user():
        """Current account from the session, or None when signed out"""
        name = session.get('account_name')
        role = session.get('account_role')
        account_id = session.get('account_id')
        if name is None or role is None or account_id is None:
            return None
        return {
            'account_id': account_id,
            'account_name': name,
            'account_email': session.get('account_email', ''),
            'account_role': parse_role(role),
        }

    @staticmethod
    def current_role():
        user = AuthService.get_current_user()
        return user['account_role'] if user else None

    @staticmethod
    def is_admin():
        return AuthService.current_role() == AccountRole.Admin
