"""
FU News - News CMS front-end on Flask
=====================================

Server-rendered front-end for the FU News backend API:
- Public site: home, categories, articles, search, tags
- Admin area: articles, categories, tags, accounts, trash, statistics
- Role-gated access (Admin, Staff, Lecturer) backed by the API's tokens

Usage:
    from flask import Flask
    from funews import FUNews

    app = Flask(__name__)
    funews = FUNews(app)                        # every module
    funews = FUNews(app, {'features': {'ops': False}})
    funews = FUNews(app, {'config_file': 'funews.yaml'})
"""

import importlib
import logging
import os

from flask import Blueprint, flash, g, jsonify, redirect, render_template, request, url_for

from .core.config import Config
from .core.errors import ApiError, ERROR_MESSAGES, friendly_message
from .core.logging_service import LoggingService
from .core.models import AccountRole, NewsStatus
from .core.utils import format_date, format_number, generate_excerpt, truncate_text

__version__ = '0.1.0'

logger = logging.getLogger(__name__)

# Feature name -> (module path, blueprint attribute names)
MODULES = {
    'auth': ('funews.modules.auth', ('auth_bp',)),
    'news_public': ('funews.modules.news_public', ('news_public_bp',)),
    'dashboard': ('funews.modules.dashboard', ('dashboard_bp',)),
    'news': ('funews.modules.news', ('news_bp',)),
    'categories': ('funews.modules.categories', ('categories_bp',)),
    'tags': ('funews.modules.tags', ('tags_bp',)),
    'accounts': ('funews.modules.accounts', ('accounts_bp',)),
    'trash': ('funews.modules.trash', ('trash_bp',)),
    'profile': ('funews.modules.profile', ('profile_bp',)),
    'ops': ('funews.modules.ops', ('ops_health_bp', 'ops_admin_bp')),
}

# Lower-case extension config keys -> Flask config keys
CONFIG_KEYS = {
    'brand_name': 'BRAND_NAME',
    'brand_tagline': 'BRAND_TAGLINE',
    'api_base_url': 'API_BASE_URL',
    'api_timeout': 'API_TIMEOUT',
    'page_size': 'PAGE_SIZE',
    'category_page_size': 'CATEGORY_PAGE_SIZE',
    'log_db': 'LOG_DB',
}

# Layout, error page and delete confirmation shared by every module
core_bp = Blueprint('funews', __name__, template_folder='templates',
                    static_folder='static', static_url_path='/funews/static')


class FUNews:
    """
    Flask extension that assembles the FU News modules onto an app.

    Args:
        app: Flask application (or None to call init_app later)
        config: dict with optional keys 'features' ({module: bool}),
            'config_file' (YAML path) and any key of CONFIG_KEYS
    """

    def __init__(self, app=None, config=None):
        self._config = dict(config or {})
        self._registered = []
        if app is not None:
            self.init_app(app)

    def init_app(self, app):
        config_file = self._config.pop('config_file', None) or os.getenv('FUNEWS_CONFIG')
        if config_file:
            yaml_config = self._map_yaml_config(self._load_yaml(config_file))
            # Explicit dict values win over the file
            features = dict(yaml_config.get('features', {}))
            features.update(self._config.get('features', {}))
            yaml_config.update(self._config)
            yaml_config['features'] = features
            self._config = yaml_config

        self._apply_config(app)
        self._setup_database_dir(app)

        app.register_blueprint(core_bp)
        self._register_modules(app)

        if 'auth' in self._registered:
            from .modules.auth import configure_oauth
            configure_oauth(app)

        self._register_context_processor(app)
        self._register_template_filters(app)
        self._register_error_handlers(app)

        app.extensions['funews'] = self
        logger.info(f"FU News initialised with modules: {', '.join(self._registered)}")

    # ===== Config =====

    @staticmethod
    def _load_yaml(path):
        import yaml
        with open(path, 'r') as f:
            return yaml.safe_load(f) or {}

    def _map_yaml_config(self, data):
        """Flatten the YAML layout into extension config keys"""
        mapped = {}
        site = data.get('site') or {}
        api = data.get('api') or {}
        pagination = data.get('pagination') or {}
        logging_cfg = data.get('logging') or {}

        if 'name' in site:
            mapped['brand_name'] = site['name']
        if 'tagline' in site:
            mapped['brand_tagline'] = site['tagline']
        if 'base_url' in api:
            mapped['api_base_url'] = api['base_url']
        if 'timeout' in api:
            mapped['api_timeout'] = api['timeout']
        if 'page_size' in pagination:
            mapped['page_size'] = pagination['page_size']
        if 'category_page_size' in pagination:
            mapped['category_page_size'] = pagination['category_page_size']
        if 'db' in logging_cfg:
            mapped['log_db'] = logging_cfg['db']

        mapped['features'] = {
            name: bool(enabled) for name, enabled in (data.get('features') or {}).items()
        }
        return mapped

    def _apply_config(self, app):
        for key in dir(Config):
            if key.isupper():
                app.config.setdefault(key, getattr(Config, key))

        for key, config_key in CONFIG_KEYS.items():
            if self._config.get(key) is not None:
                app.config[config_key] = self._config[key]

    def _setup_database_dir(self, app):
        log_db = app.config.get('LOG_DB')
        db_dir = os.path.dirname(log_db) if log_db else app.config.get('DB_DIR')
        if db_dir:
            os.makedirs(db_dir, exist_ok=True)

    # ===== Modules =====

    def _enabled(self, name):
        return self._config.get('features', {}).get(name, True)

    def _register_modules(self, app):
        for name, (module_path, blueprint_names) in MODULES.items():
            if not self._enabled(name):
                continue
            module = importlib.import_module(module_path)
            for blueprint_name in blueprint_names:
                app.register_blueprint(getattr(module, blueprint_name))
            self._registered.append(name)

    def get_registered_modules(self):
        return list(self._registered)

    # ===== Templates =====

    def _register_context_processor(self, app):
        extension = self

        @app.context_processor
        def inject_funews():
            from .modules.auth.service import AuthService
            user = AuthService.get_current_user()
            return {
                'brand_name': app.config.get('BRAND_NAME') or 'FU News',
                'brand_tagline': app.config.get('BRAND_TAGLINE', ''),
                'current_user': user,
                'is_admin': bool(user) and user['account_role'] == AccountRole.Admin,
                'AccountRole': AccountRole,
                'NewsStatus': NewsStatus,
                'funews_config': {
                    'version': __version__,
                    'modules': extension.get_registered_modules(),
                },
            }

    def _register_template_filters(self, app):
        app.add_template_filter(format_date, 'format_date')
        app.add_template_filter(truncate_text, 'truncate_text')
        app.add_template_filter(generate_excerpt, 'excerpt')
        app.add_template_filter(format_number, 'format_number')

    # ===== Errors =====

    def _register_error_handlers(self, app):

        def wants_json():
            return request.path.startswith('/api/') or request.path.startswith('/health')

        def sign_out():
            from .modules.auth.service import TokenStore
            TokenStore.clear()
            flash('Your session has expired. Please sign in again.', 'error')
            return redirect(url_for('auth.login', next=request.full_path.rstrip('?')))

        @app.errorhandler(ApiError)
        def handle_api_error(error):
            logger.warning(f"Unhandled API error on {request.path}: {error!r}")
            if wants_json():
                status = error.status if error.status and error.status >= 400 else 502
                return jsonify({'error': friendly_message(error)}), status
            if error.status == 401 and 'auth' in extension_modules():
                return sign_out()
            if error.status == 403 and 'news_public' in extension_modules():
                return redirect(url_for('news_public.unauthorized'))
            status = error.status if error.status and error.status >= 400 else 502
            return render_template('errors/error.html',
                                   status=status,
                                   message=friendly_message(error)), status

        @app.errorhandler(404)
        def handle_not_found(error):
            if wants_json():
                return jsonify({'error': 'Not found'}), 404
            return render_template('errors/error.html', status=404,
                                   message='The requested page was not found'), 404

        @app.errorhandler(500)
        def handle_server_error(error):
            original = getattr(error, 'original_exception', None) or error
            LoggingService.log_error_with_traceback('app', original, {'path': request.path})
            if wants_json():
                return jsonify({'error': ERROR_MESSAGES['SERVER_ERROR']}), 500
            return render_template('errors/error.html', status=500,
                                   message=ERROR_MESSAGES['SERVER_ERROR']), 500

        @app.after_request
        def sign_out_on_expired_token(response):
            # A 401 from the backend means the stored token is no longer valid
            if g.get('api_unauthorized') and 'auth' in extension_modules() \
                    and not (request.endpoint or '').startswith('auth.') and not wants_json():
                g.api_unauthorized = False
                return sign_out()
            return response

        def extension_modules():
            return self.get_registered_modules()
