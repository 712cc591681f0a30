"""
Trash Service
=============

Soft-deleted records live in different places per entity:

- news: IsDeleted eq true on /api/NewsArticle
- categories: IsActive eq false
- tags: IsDeleted eq true on /api/Tag
- accounts: IsActive eq false (admins only, accounts cannot be hard deleted)

get_trash_items merges them into one newest-first list of TrashItem.
"""

import logging
from datetime import datetime, timezone

from ...core.api import get_api_client
from ...core.errors import ApiError, TrashError
from ...core.logging_service import LoggingService
from ...core.models import (
    AccountRole, NewsStatus, TrashItem, TrashStatistics, account_payload, category_payload,
)
from ...core.odata import deleted_items, inactive_accounts, inactive_categories
from ...core.utils import parse_datetime
from ..accounts.service import AccountService
from ..categories.service import CategoryService
from ..news.service import NewsArticleTagService, NewsService
from ..tags.service import TagService

logger = logging.getLogger(__name__)


def _now_iso():
    return datetime.now(timezone.utc).isoformat()


def _sort_key(item):
    parsed = parse_datetime(item.deleted_date)
    if parsed is None:
        return 0.0
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.timestamp()


class TrashService:

    def __init__(self, client=None):
        self.client = client or get_api_client()
        self.news = NewsService(self.client)
        self.categories = CategoryService(self.client)
        self.tags = TagService(self.client)
        self.accounts = AccountService(self.client)
        self.article_tags = NewsArticleTagService(self.client)

    # ===== Soft delete =====

    def soft_delete_news(self, news_id):
        self.news.delete_news(news_id)

    def soft_delete_category(self, category_id):
        self.categories.delete_category(category_id)

    def soft_delete_tag(self, tag_id):
        self.tags.delete_tag(tag_id)

    def soft_delete_account(self, account_id):
        # No soft delete endpoint for accounts, deactivate instead
        self.accounts.deactivate_account(account_id)

    # ===== Hard delete (admin only) =====

    def hard_delete_news(self, news_id):
        self.news.hard_delete_news(news_id)

    def hard_delete_category(self, category_id):
        self.categories.hard_delete_category(category_id)

    def hard_delete_tag(self, tag_id):
        self.tags.hard_delete_tag(tag_id)

    def remove_tag_from_article(self, article_id, tag_id):
        self.article_tags.remove_tag_from_article(article_id, tag_id)

    # ===== Trash listing =====

    def _collect(self, label, loader, to_item):
        """Load one source; a failing source is logged and contributes nothing"""
        try:
            return [to_item(record) for record in loader()]
        except ApiError as e:
            logger.error(f"Error loading {label}: {e}")
            LoggingService.warning('trash', f"Could not load {label}", {'status': e.status})
            return []

    def get_trash_items(self, role=None):
        items = []

        items.extend(self._collect(
            'deleted news',
            lambda: self.news.get_news_odata(deleted_items()),
            lambda n: TrashItem(
                id=n.news_article_id,
                type='news',
                title=n.news_title,
                deleted_date=n.modified_date or _now_iso(),
                deleted_by=(n.modified_by.account_name if n.modified_by else None) or 'Unknown',
                original_data=n.to_api(),
            ),
        ))

        items.extend(self._collect(
            'inactive categories',
            lambda: self.categories.get_categories_odata(inactive_categories()),
            lambda c: TrashItem(
                id=c.category_id,
                type='category',
                title=c.category_name,
                deleted_date=c.modified_date or _now_iso(),
                original_data=c.to_api(),
            ),
        ))

        if role is not None and AccountRole(role) == AccountRole.Admin:
            items.extend(self._collect(
                'inactive accounts',
                lambda: self.accounts.get_accounts_odata(inactive_accounts()),
                lambda a: TrashItem(
                    id=a.account_id,
                    type='account',
                    title=a.account_name,
                    deleted_date=a.modified_date or _now_iso(),
                    original_data=a.to_api(),
                ),
            ))

        items.extend(self._collect(
            'deleted tags',
            lambda: self.tags.get_tags_odata(deleted_items()),
            lambda t: TrashItem(
                id=t.tag_id,
                type='tag',
                title=t.tag_name,
                deleted_date=t.modified_date or _now_iso(),
                original_data=t.to_api(),
            ),
        ))

        return sorted(items, key=_sort_key, reverse=True)

    def find_item(self, item_type, item_id, role=None):
        for item in self.get_trash_items(role):
            if item.type == item_type and str(item.id) == str(item_id):
                return item
        return None

    # ===== Restore / permanent delete =====

    def restore_item(self, item):
        if item.type == 'news':
            self.news.change_news_status(item.id, NewsStatus.Active)
        elif item.type == 'category':
            data = item.original_data or {}
            self.categories.update_category(item.id, category_payload(
                data.get('categoryName', item.title),
                data.get('categoryDescription'),
                data.get('parentCategoryId'),
                is_active=True,
            ))
        elif item.type == 'tag':
            self.tags.restore_tag(item.id)
        elif item.type == 'account':
            data = item.original_data or {}
            self.accounts.update_account(item.id, account_payload(
                data.get('accountName', item.title),
                data.get('accountEmail', ''),
                data.get('accountRole', AccountRole.Staff),
                is_active=True,
            ))
        else:
            raise TrashError(f"Unknown trash item type: {item.type}")

    def permanent_delete(self, item):
        if item.type == 'news':
            self.news.hard_delete_news(item.id)
        elif item.type == 'category':
            self.categories.hard_delete_category(item.id)
        elif item.type == 'tag':
            self.tags.hard_delete_tag(item.id)
        elif item.type == 'account':
            raise TrashError('Accounts cannot be permanently deleted')
        else:
            raise TrashError(f"Unknown trash item type: {item.type}")

    def empty_trash(self, role=None):
        """Hard delete everything deletable; returns the number of items removed"""
        removed = 0
        for item in self.get_trash_items(role):
            if item.type == 'account':
                continue
            self.permanent_delete(item)
            removed += 1
        return removed

    def get_trash_statistics(self, role=None, items=None):
        if items is None:
            items = self.get_trash_items(role)
        return TrashStatistics.from_items(items)
