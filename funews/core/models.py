"""
FU News Models
==============

Plain data shapes mirrored from the backend schema. The backend speaks
camelCase; attributes here are snake_case. `from_api` accepts the raw dict
and the `*_payload` helpers build request bodies.
"""

from dataclasses import dataclass, field, asdict
from enum import IntEnum
from typing import Any, Dict, List, Optional


class NewsStatus(IntEnum):
    Inactive = 0
    Active = 1


class AccountRole(IntEnum):
    Admin = 0
    Staff = 1
    Lecturer = 2

    @property
    def label(self):
        return self.name


TRASH_TYPES = ('news', 'category', 'tag', 'account')


def parse_role(value):
    """Map a role from the API (int or "Admin"/"Staff"/"Lecturer") to AccountRole.

    Unknown values fall back to Staff.
    """
    if isinstance(value, AccountRole):
        return value
    if isinstance(value, str):
        if value.isdecimal():
            value = int(value)
        else:
            return {
                'admin': AccountRole.Admin,
                'staff': AccountRole.Staff,
                'lecturer': AccountRole.Lecturer,
            }.get(value.strip().lower(), AccountRole.Staff)
    try:
        return AccountRole(int(value))
    except (TypeError, ValueError):
        return AccountRole.Staff


def parse_status(value):
    if isinstance(value, str):
        if value.isdecimal():
            value = int(value)
        else:
            return NewsStatus.Active if value.strip().lower() == 'active' else NewsStatus.Inactive
    try:
        return NewsStatus(int(value))
    except (TypeError, ValueError):
        return NewsStatus.Inactive


def _first(data, *keys, default=None):
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return default


@dataclass
class Tag:
    tag_id: int
    tag_name: str
    note: Optional[str] = None
    modified_date: Optional[str] = None

    @classmethod
    def from_api(cls, data):
        return cls(
            tag_id=_first(data, 'tagId', 'id', default=0),
            tag_name=_first(data, 'tagName', 'name', default=''),
            note=data.get('note'),
            modified_date=data.get('modifiedDate'),
        )

    def to_api(self):
        return {'tagId': self.tag_id, 'tagName': self.tag_name, 'note': self.note}


@dataclass
class Category:
    category_id: int
    category_name: str
    category_description: Optional[str] = None
    parent_category_id: Optional[int] = None
    is_active: bool = True
    sub_categories: List['Category'] = field(default_factory=list)
    modified_date: Optional[str] = None

    @classmethod
    def from_api(cls, data):
        subs = data.get('subCategories') or []
        if isinstance(subs, dict):
            subs = subs.get('$values', [])
        return cls(
            category_id=_first(data, 'categoryId', 'id', default=0),
            category_name=_first(data, 'categoryName', 'name', default=''),
            category_description=data.get('categoryDescription'),
            parent_category_id=data.get('parentCategoryId'),
            is_active=bool(data.get('isActive', True)),
            sub_categories=[cls.from_api(s) for s in subs],
            modified_date=data.get('modifiedDate'),
        )

    def to_api(self):
        return {
            'categoryId': self.category_id,
            'categoryName': self.category_name,
            'categoryDescription': self.category_description,
            'parentCategoryId': self.parent_category_id,
            'isActive': self.is_active,
        }


@dataclass
class AccountRef:
    account_id: int
    account_name: str

    @classmethod
    def from_api(cls, data):
        if not data:
            return None
        return cls(
            account_id=_first(data, 'accountId', 'id', default=0),
            account_name=data.get('accountName', ''),
        )


@dataclass
class NewsArticle:
    news_article_id: int
    news_title: str
    category_id: int = 0
    category_name: str = ''
    created_date: str = ''
    news_status: NewsStatus = NewsStatus.Active
    headline: Optional[str] = None
    news_content: Optional[str] = None
    news_source: Optional[str] = None
    modified_date: Optional[str] = None
    created_by: Optional[AccountRef] = None
    modified_by: Optional[AccountRef] = None
    category: Optional[Category] = None
    tags: List[Tag] = field(default_factory=list)

    @classmethod
    def from_api(cls, data):
        tags = data.get('tags') or []
        if isinstance(tags, dict):
            tags = tags.get('$values', [])
        category = data.get('category')
        category_name = data.get('categoryName') or (category or {}).get('categoryName', '')
        return cls(
            news_article_id=_first(data, 'newsArticleId', 'id', default=0),
            news_title=data.get('newsTitle', ''),
            category_id=_first(data, 'categoryId', default=0),
            category_name=category_name,
            created_date=data.get('createdDate', ''),
            news_status=parse_status(data.get('newsStatus', 1)),
            headline=data.get('headline'),
            news_content=data.get('newsContent'),
            news_source=data.get('newsSource'),
            modified_date=data.get('modifiedDate'),
            created_by=AccountRef.from_api(data.get('createdBy')),
            modified_by=AccountRef.from_api(data.get('modifiedBy')),
            category=Category.from_api(category) if category else None,
            tags=[Tag.from_api(t) for t in tags],
        )

    @property
    def is_active(self):
        return self.news_status == NewsStatus.Active

    def to_api(self):
        return {
            'newsArticleId': self.news_article_id,
            'newsTitle': self.news_title,
            'headline': self.headline,
            'newsContent': self.news_content,
            'newsSource': self.news_source,
            'categoryId': self.category_id,
            'categoryName': self.category_name,
            'newsStatus': int(self.news_status),
            'tags': [t.to_api() for t in self.tags],
        }


@dataclass
class SystemAccount:
    account_id: int
    account_name: str
    account_email: str
    account_role: AccountRole = AccountRole.Staff
    is_active: bool = True
    modified_date: Optional[str] = None

    @classmethod
    def from_api(cls, data):
        return cls(
            account_id=_first(data, 'accountId', 'id', default=0),
            account_name=data.get('accountName', ''),
            account_email=data.get('accountEmail', ''),
            account_role=parse_role(data.get('accountRole', AccountRole.Staff)),
            is_active=bool(data.get('isActive', True)),
            modified_date=data.get('modifiedDate'),
        )

    def to_api(self):
        return {
            'accountId': self.account_id,
            'accountName': self.account_name,
            'accountEmail': self.account_email,
            'accountRole': int(self.account_role),
            'isActive': self.is_active,
        }


@dataclass
class LoginResponse:
    access_token: str
    refresh_token: str
    account_id: int
    account_name: str
    account_email: str = ''
    account_role: AccountRole = AccountRole.Staff
    access_token_expires: Optional[str] = None
    refresh_token_expires: Optional[str] = None

    @classmethod
    def from_api(cls, data):
        user = data.get('user') or {}
        return cls(
            access_token=data.get('accessToken', ''),
            refresh_token=data.get('refreshToken', ''),
            account_id=_first(user, 'accountId', default=_first(data, 'accountId', default=0)),
            account_name=user.get('accountName') or data.get('accountName', ''),
            account_email=user.get('accountEmail') or data.get('accountEmail', ''),
            account_role=parse_role(user.get('accountRole', data.get('accountRole'))),
            access_token_expires=data.get('accessTokenExpires'),
            refresh_token_expires=data.get('refreshTokenExpires'),
        )


@dataclass
class TrashItem:
    id: int
    type: str
    title: str
    deleted_date: str
    deleted_by: str = 'Unknown'
    original_data: Dict[str, Any] = field(default_factory=dict)

    def to_dict(self):
        return asdict(self)


@dataclass
class TrashStatistics:
    total_items: int = 0
    news_count: int = 0
    category_count: int = 0
    tag_count: int = 0
    account_count: int = 0

    @classmethod
    def from_items(cls, items):
        return cls(
            total_items=len(items),
            news_count=sum(1 for i in items if i.type == 'news'),
            category_count=sum(1 for i in items if i.type == 'category'),
            tag_count=sum(1 for i in items if i.type == 'tag'),
            account_count=sum(1 for i in items if i.type == 'account'),
        )


# ===== Request payloads =====

def news_article_payload(news_title, news_content, category_id, news_status=NewsStatus.Active,
                         headline=None, news_source=None, tag_ids=None):
    payload = {
        'newsTitle': news_title,
        'headline': headline,
        'newsContent': news_content,
        'newsSource': news_source,
        'categoryId': int(category_id),
        'newsStatus': int(news_status),
    }
    if tag_ids is not None:
        payload['tagIds'] = [int(t) for t in tag_ids]
    return payload


def category_payload(category_name, category_description=None, parent_category_id=None, is_active=True):
    return {
        'categoryName': category_name,
        'categoryDescription': category_description,
        'parentCategoryId': parent_category_id,
        'isActive': bool(is_active),
    }


def tag_payload(tag_name, note=None):
    return {'tagName': tag_name, 'note': note}


def account_payload(account_name, account_email, account_role=AccountRole.Staff,
                    is_active=True, account_password=None):
    payload = {
        'accountName': account_name,
        'accountEmail': account_email,
        'accountRole': int(account_role),
        'isActive': bool(is_active),
    }
    if account_password:
        payload['accountPassword'] = account_password
    return payload
