"""
Account Service
===============

Wraps /api/SystemAccount. Accounts are never removed: "delete" means
deactivate, and only when the account has authored no articles.
"""

import logging
import secrets
from collections import Counter

from ...core.api import API_ENDPOINTS, get_api_client
from ...core.errors import ApiError, ERROR_MESSAGES
from ...core.models import NewsStatus, SystemAccount
from ...core.odata import ODataQuery, active_accounts, accounts_by_role, as_params, unwrap_collection, unwrap_single
from ...core.utils import parse_datetime

logger = logging.getLogger(__name__)

ACCOUNT = API_ENDPOINTS['SYSTEM_ACCOUNT']


def _account(response):
    data = unwrap_single(response)
    return SystemAccount.from_api(data) if isinstance(data, dict) else None


def generate_temporary_password(length=12):
    """Random password handed to an admin after a reset"""
    return secrets.token_urlsafe(length)[:length] + '1!'


class AccountService:

    def __init__(self, client=None):
        self.client = client or get_api_client()

    def _list(self, params=None):
        response = self.client.get(ACCOUNT['BASE'], params=params)
        return [SystemAccount.from_api(a) for a in unwrap_collection(response)]

    def get_all_accounts(self):
        return self._list()

    def get_account_by_id(self, account_id):
        return _account(self.client.get(ACCOUNT['BY_ID'](account_id)))

    def create_account(self, payload):
        return _account(self.client.post(ACCOUNT['BASE'], payload))

    def update_account(self, account_id, payload):
        return _account(self.client.put(ACCOUNT['BY_ID'](account_id), payload))

    def get_profile(self):
        return _account(self.client.get(ACCOUNT['PROFILE']))

    def update_profile(self, account_name, account_email):
        return _account(self.client.put(ACCOUNT['PROFILE'], {
            'accountName': account_name,
            'accountEmail': account_email,
        }))

    def change_password(self, old_password, new_password, confirm_password):
        self.client.patch(ACCOUNT['CHANGE_PASSWORD'], {
            'oldPassword': old_password,
            'newPassword': new_password,
            'confirmPassword': confirm_password,
        })

    def reset_password(self, account_id, new_password=None):
        """Reset to the given password (or a generated one) and return it"""
        new_password = new_password or generate_temporary_password()
        self.client.patch(ACCOUNT['RESET_PASSWORD'](account_id), {'newPassword': new_password})
        return new_password

    def toggle_account_status(self, account_id):
        return _account(self.client.patch(ACCOUNT['TOGGLE_STATUS'](account_id)))

    def deactivate_account(self, account_id):
        """Make an account inactive. An inactive account is returned untouched."""
        account = self.get_account_by_id(account_id)
        if account is None:
            raise ApiError(ERROR_MESSAGES['NOT_FOUND'], 404)
        if not account.is_active:
            return account
        return self.toggle_account_status(account_id)

    def get_account_statistics(self):
        return unwrap_single(self.client.get(ACCOUNT['STATISTICS']))

    def get_accounts_odata(self, query=None):
        return self._list(as_params(query))

    def get_active_accounts(self):
        return self.get_accounts_odata(active_accounts())

    def get_accounts_by_role(self, role):
        return self.get_accounts_odata(accounts_by_role(role))

    def get_news_created_by_account(self, account_id):
        from ..news.service import NewsService
        query = (ODataQuery()
                 .filter(f"CreatedBy/AccountId eq {int(account_id)}")
                 .order_by('CreatedDate', desc=True))
        return NewsService(self.client).get_news_odata(query)

    def can_delete_account(self, account_id):
        """True when the account authored no articles. Lookup failures count as 'no'."""
        try:
            return len(self.get_news_created_by_account(account_id)) == 0
        except ApiError as e:
            logger.error(f"Error checking if account {account_id} can be deleted: {e}")
            return False

    def delete_account(self, account_id):
        """Deactivate an account that has no articles"""
        if not self.can_delete_account(account_id):
            raise ApiError(ERROR_MESSAGES['ACCOUNT_HAS_ARTICLES'], 409)
        self.deactivate_account(account_id)

    def get_statistics_report(self, start_date, end_date):
        """Articles created between two YYYY-MM-DD dates, grouped four ways"""
        from ..news.service import NewsService
        query = (ODataQuery()
                 .filter(f"CreatedDate ge {start_date}T00:00:00Z and CreatedDate le {end_date}T23:59:59Z")
                 .expand('Category', 'CreatedBy')
                 .order_by('CreatedDate', desc=True))
        articles = NewsService(self.client).get_news_odata(query)
        return build_statistics_report(articles)


def _ranked(counter, label):
    # Counter.most_common keeps first-seen order among ties
    return [{label: key, 'count': count} for key, count in counter.most_common()]


def build_statistics_report(articles):
    by_date = Counter()
    for article in articles:
        created = parse_datetime(article.created_date)
        by_date[created.date().isoformat() if created else 'Unknown'] += 1

    by_category = Counter(
        (a.category.category_name if a.category else a.category_name) or 'Uncategorized'
        for a in articles
    )
    by_author = Counter(
        (a.created_by.account_name if a.created_by else '') or 'Unknown'
        for a in articles
    )
    by_status = Counter(
        'Active' if a.news_status == NewsStatus.Active else 'Inactive'
        for a in articles
    )

    return {
        'total_articles': len(articles),
        'articles_by_date': sorted(
            ({'date': d, 'count': c} for d, c in by_date.items()),
            key=lambda row: row['date'], reverse=True,
        ),
        'articles_by_category': _ranked(by_category, 'category_name'),
        'articles_by_author': _ranked(by_author, 'author_name'),
        'articles_by_status': _ranked(by_status, 'status'),
    }
