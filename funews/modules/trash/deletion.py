"""
Delete Workflow
===============

Confirm-then-delete used by every admin list. Soft deletes need an
explicit confirmation; hard deletes additionally need the Admin role.
"""

import logging
from dataclasses import dataclass
from typing import Optional

from ...core.errors import ApiError, TrashError, ERROR_MESSAGES
from ...core.logging_service import LoggingService
from ...core.models import AccountRole, parse_role

logger = logging.getLogger(__name__)

DELETED = 'deleted'
CANCELLED = 'cancelled'
FAILED = 'failed'
FORBIDDEN = 'forbidden'


@dataclass
class DeleteResult:
    status: str
    error: Optional[str] = None

    @property
    def ok(self):
        return self.status == DELETED


class DeleteWorkflow:
    """
    Args:
        role: AccountRole of the signed-in account (None when anonymous)
        trash: TrashService used by the per-entity shortcuts
    """

    def __init__(self, role, trash=None):
        self.role = parse_role(role) if role is not None else None
        self._trash = trash
        self.error = None

    @property
    def trash(self):
        if self._trash is None:
            from .service import TrashService
            self._trash = TrashService()
        return self._trash

    @property
    def is_admin(self):
        return self.role == AccountRole.Admin

    def clear_error(self):
        self.error = None

    def execute_delete(self, delete_fn, confirmed=False):
        if not confirmed:
            return DeleteResult(CANCELLED)

        self.error = None
        try:
            delete_fn()
        except (ApiError, TrashError) as e:
            self.error = str(e) or 'An unknown error occurred'
            logger.warning(f"Delete failed: {self.error}")
            return DeleteResult(FAILED, self.error)
        return DeleteResult(DELETED)

    def execute_hard_delete(self, delete_fn, confirmed=False):
        if not self.is_admin:
            self.error = ERROR_MESSAGES['HARD_DELETE_FORBIDDEN']
            LoggingService.log_security_event('Hard delete refused for non-admin',
                                              {'role': self.role.name if self.role is not None else None})
            return DeleteResult(FORBIDDEN, self.error)
        return self.execute_delete(delete_fn, confirmed)

    # ===== Per-entity shortcuts =====

    def soft_delete_news(self, news_id, confirmed=False):
        return self.execute_delete(lambda: self.trash.soft_delete_news(news_id), confirmed)

    def hard_delete_news(self, news_id, confirmed=False):
        return self.execute_hard_delete(lambda: self.trash.hard_delete_news(news_id), confirmed)

    def soft_delete_category(self, category_id, confirmed=False):
        return self.execute_delete(lambda: self.trash.soft_delete_category(category_id), confirmed)

    def hard_delete_category(self, category_id, confirmed=False):
        return self.execute_hard_delete(lambda: self.trash.hard_delete_category(category_id), confirmed)

    def soft_delete_tag(self, tag_id, confirmed=False):
        return self.execute_delete(lambda: self.trash.soft_delete_tag(tag_id), confirmed)

    def hard_delete_tag(self, tag_id, confirmed=False):
        return self.execute_hard_delete(lambda: self.trash.hard_delete_tag(tag_id), confirmed)

    def soft_delete_account(self, account_id, confirmed=False):
        return self.execute_delete(lambda: self.trash.soft_delete_account(account_id), confirmed)

    def remove_tag_from_article(self, article_id, tag_id, confirmed=False):
        return self.execute_delete(
            lambda: self.trash.remove_tag_from_article(article_id, tag_id), confirmed
        )
