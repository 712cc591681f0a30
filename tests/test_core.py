"""
Core helpers: pagination, OData, models, validation, text utils and the API client.
"""

from datetime import datetime, timezone

import pytest
import requests

from funews.core.api import ApiClient
from funews.core.errors import ApiError, ERROR_MESSAGES, friendly_message
from funews.core.logging_service import LoggingService
from funews.core.models import (
    AccountRole, LoginResponse, NewsArticle, NewsStatus, TrashItem, TrashStatistics,
    account_payload, news_article_payload, parse_role, parse_status,
)
from funews.core import odata
from funews.core.odata import (
    ODataQuery, as_params, eq, extract_count, keyword_filter, literal, unwrap_collection, unwrap_single,
)
from funews.core.pagination import Pagination, clamp_page_size, page_window, parse_page
from funews.core.utils import format_content, format_date, format_number, truncate_text
from funews.core.validation import (
    normalize_search_keyword, password_strength, validate_account, validate_article,
    validate_change_password, validate_login, validate_register,
)


# ---------------------------------------------------------------------------
# Pagination
# ---------------------------------------------------------------------------

def test_total_pages_rounds_up():
    assert Pagination(25, 12).total_pages == 3
    assert Pagination(24, 12).total_pages == 2
    assert Pagination(0, 10).total_pages == 0


def test_go_to_page_stays_in_range():
    pagination = Pagination(25, 12, 1)

    assert pagination.go_to_page(4) is False
    assert pagination.go_to_page(0) is False
    assert pagination.current_page == 1

    assert pagination.go_to_page(3) is True
    assert pagination.has_next_page is False
    assert pagination.has_prev_page is True
    assert pagination.skip == 24


def test_empty_result_has_no_pages_to_visit():
    pagination = Pagination(0, 10)
    assert pagination.go_to_page(1) is False
    assert pagination.next_page() is False
    assert pagination.prev_page() is False


def test_page_size_is_clamped():
    assert clamp_page_size(0) == 1
    assert clamp_page_size(500) == 100
    assert clamp_page_size('nope') == 10
    assert parse_page('-3') == 1
    assert parse_page(None) == 1
    assert parse_page('4') == 4


@pytest.mark.parametrize("current,expected", [
    (1, [1, 2, 3, 4, 5, '...', 20]),
    (10, [1, '...', 9, 10, 11, '...', 20]),
    (20, [1, '...', 16, 17, 18, 19, 20]),
])
def test_page_window(current, expected):
    assert page_window(current, 20) == expected


def test_page_window_short_list():
    assert page_window(2, 5) == [1, 2, 3, 4, 5]


# ---------------------------------------------------------------------------
# OData
# ---------------------------------------------------------------------------

def test_literals_are_escaped():
    assert literal("O'Brien") == "'O''Brien'"
    assert literal(True) == 'true'
    assert literal(None) == 'null'
    assert literal(NewsStatus.Active) == '1'
    assert literal(3) == '3'


def test_query_params():
    params = (ODataQuery()
              .filter(eq('CategoryId', 3))
              .order_by('CreatedDate', desc=True)
              .page(2, 10)
              .count()
              .to_params())

    assert params == {
        '$filter': 'CategoryId eq 3',
        '$orderby': 'CreatedDate desc',
        '$top': 10,
        '$skip': 10,
        '$count': 'true',
    }


def test_or_clauses_are_parenthesised():
    query = ODataQuery().filter(eq('IsDeleted', False)).filter(keyword_filter('ai'))

    assert query.filter_expression() == (
        "IsDeleted eq false and (contains(NewsTitle, 'ai') or contains(NewsContent, 'ai'))"
    )


def test_as_params():
    assert as_params(None) is None
    assert as_params({'$top': 1}) == {'$top': 1}
    assert as_params(ODataQuery().top(2)) == {'$top': 2}


def test_unwrap_collection_shapes():
    assert unwrap_collection([1, 2]) == [1, 2]
    assert unwrap_collection({'$values': [1]}) == [1]
    assert unwrap_collection({'value': [2]}) == [2]
    assert unwrap_collection({'data': [3]}) == [3]
    assert unwrap_collection({'data': {'$values': [4]}}) == [4]
    assert unwrap_collection(None) == []
    assert unwrap_collection('text') == []


def test_unwrap_single_and_count():
    assert unwrap_single({'success': True, 'data': {'a': 1}}) == {'a': 1}
    assert unwrap_single({'a': 1}) == {'a': 1}
    assert extract_count({'@odata.count': 42, 'value': []}) == 42
    assert extract_count({'value': []}, 5) == 5
    assert extract_count({'data': {'totalCount': 7}}) == 7


# ---------------------------------------------------------------------------
# Models
# ---------------------------------------------------------------------------

def test_news_article_from_api():
    article = NewsArticle.from_api({
        'newsArticleId': 9,
        'newsTitle': 'Exam week',
        'categoryId': 2,
        'category': {'categoryId': 2, 'categoryName': 'Campus'},
        'newsStatus': 1,
        'createdDate': '2024-03-05T10:00:00Z',
        'createdBy': {'accountId': 4, 'accountName': 'Ada'},
        'tags': {'$values': [{'tagId': 1, 'tagName': 'exams'}]},
    })

    assert article.news_article_id == 9
    assert article.category_name == 'Campus'
    assert article.is_active
    assert article.created_by.account_name == 'Ada'
    assert [t.tag_name for t in article.tags] == ['exams']


def test_role_and_status_parsing():
    assert parse_role('Admin') == AccountRole.Admin
    assert parse_role('2') == AccountRole.Lecturer
    assert parse_role(1) == AccountRole.Staff
    assert parse_role(None) == AccountRole.Staff
    assert parse_role('unknown') == AccountRole.Staff
    assert parse_status('active') == NewsStatus.Active
    assert parse_status('0') == NewsStatus.Inactive
    assert parse_role('²') == AccountRole.Staff
    assert parse_status('²') == NewsStatus.Inactive


def test_login_response_reads_nested_user():
    login = LoginResponse.from_api({
        'accessToken': 'a',
        'refreshToken': 'r',
        'user': {'accountId': 5, 'accountName': 'N', 'accountEmail': 'n@x.io', 'accountRole': 'Admin'},
    })

    assert login.access_token == 'a'
    assert login.account_id == 5
    assert login.account_role == AccountRole.Admin


def test_payloads():
    payload = news_article_payload('T', 'Content here', '3', NewsStatus.Inactive, tag_ids=['1', '2'])
    assert payload['categoryId'] == 3
    assert payload['newsStatus'] == 0
    assert payload['tagIds'] == [1, 2]

    account = account_payload('A', 'a@x.io', AccountRole.Lecturer)
    assert account['accountRole'] == 2
    assert 'accountPassword' not in account


def test_trash_statistics_counts_types():
    items = [
        TrashItem(1, 'news', 'n', '2024-01-01'),
        TrashItem(2, 'news', 'n2', '2024-01-02'),
        TrashItem(3, 'tag', 't', '2024-01-03'),
    ]
    stats = TrashStatistics.from_items(items)
    assert stats.total_items == 3
    assert stats.news_count == 2
    assert stats.tag_count == 1
    assert stats.account_count == 0


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

def test_account_email_must_be_valid():
    errors = validate_account({
        'account_name': 'Ada',
        'account_email': 'not-an-email',
        'account_password': 'secret1',
    })
    assert errors == {'account_email': 'Please enter a valid email address'}


def test_account_password_only_required_on_create():
    form = {'account_name': 'Ada', 'account_email': 'ada@funews.test'}
    assert 'account_password' in validate_account(form, is_new=True)
    assert validate_account(form, is_new=False) == {}


def test_article_needs_category_and_content():
    errors = validate_article({'news_title': 'T', 'news_content': 'short', 'category_id': '0'})
    assert errors['news_content'] == 'Content must be at least 10 characters'
    assert errors['category_id'] == 'Please select a category'


def test_article_category_must_be_a_plain_number():
    base = {'news_title': 'T', 'news_content': 'Long enough content'}
    assert validate_article(dict(base, category_id='²'))['category_id'] == 'Please select a category'
    assert validate_article(dict(base, category_id='-3'))['category_id'] == 'Please select a category'
    assert validate_article(dict(base, category_id=' 4 ')) == {}


def test_login_and_register_rules():
    assert validate_login({'email': 'a@b.co', 'password': '123456'}) == {}
    assert 'password' in validate_login({'email': 'a@b.co', 'password': '123'})

    errors = validate_register({
        'account_name': 'A',
        'account_email': 'a@b.co',
        'account_password': 'longenough',
        'confirm_password': 'different',
    })
    assert set(errors) == {'account_name', 'confirm_password'}


def test_new_password_must_differ():
    errors = validate_change_password({
        'old_password': 'secret1',
        'new_password': 'secret1',
        'confirm_password': 'secret1',
    })
    assert errors == {'new_password': 'New password must be different from current password'}


def test_search_keyword_normalisation():
    assert normalize_search_keyword(' a ') is None
    assert normalize_search_keyword('  exam ') == 'exam'
    assert len(normalize_search_keyword('x' * 150)) == 100


def test_password_strength():
    assert password_strength('') == (0, '')
    assert password_strength('abc')[1] == 'Weak'
    assert password_strength('abcdefgh')[1] == 'Medium'
    assert password_strength('Abcdef12!') == (5, 'Strong')


# ---------------------------------------------------------------------------
# Text utils and error messages
# ---------------------------------------------------------------------------

def test_format_date():
    assert format_date('2024-03-05T10:00:00Z') == '05/03/2024'
    assert format_date('nope') == 'Invalid date'
    now = datetime(2024, 3, 10, tzinfo=timezone.utc)
    assert format_date('2024-03-05T10:00:00Z', 'relative', now=now) == '4 days ago'


def test_text_helpers():
    assert truncate_text('hello world', 5) == 'hello...'
    assert format_number(1234567) == '1.234.567'


def test_format_content_escapes_plain_text():
    assert format_content('a\n\nb') == '<p>a</p><p>b</p>'
    assert '&lt;script&gt;' in format_content('<script>alert(1)</script>')


def test_friendly_messages():
    assert friendly_message(ApiError('x', 404)) == ERROR_MESSAGES['NOT_FOUND']
    assert friendly_message(ApiError('x', 500)) == ERROR_MESSAGES['SERVER_ERROR']
    assert friendly_message(ApiError('Request timeout', 408)) == 'Request timeout'


# ---------------------------------------------------------------------------
# ApiClient
# ---------------------------------------------------------------------------

class FakeResponse:

    def __init__(self, status_code=200, body=None, content_type='application/json'):
        self.status_code = status_code
        self._body = body
        self.content = b'' if body is None else b'{}'
        self.headers = {'content-type': content_type}

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    def json(self):
        if isinstance(self._body, Exception):
            raise self._body
        return self._body


class FakeHttp:

    def __init__(self, response=None, raises=None):
        self.response = response
        self.raises = raises
        self.calls = []

    def request(self, method, url, **kwargs):
        self.calls.append((method, url, kwargs))
        if self.raises is not None:
            raise self.raises
        return self.response


def test_client_success_sends_token_and_params():
    http = FakeHttp(FakeResponse(200, {'value': []}))
    client = ApiClient('http://backend.test', token='tok', http=http)

    assert client.get('/api/Tag', params={'$top': 5, 'skip': None}) == {'value': []}

    method, url, kwargs = http.calls[0]
    assert method == 'GET'
    assert url == 'http://backend.test/api/Tag'
    assert kwargs['headers']['Authorization'] == 'Bearer tok'
    assert kwargs['params'] == {'$top': 5}
    assert 'json' not in kwargs


def test_client_posts_json_body():
    http = FakeHttp(FakeResponse(200, {'ok': True}))
    ApiClient('http://backend.test', http=http).post('/api/Tag', {'tagName': 'x'})

    assert http.calls[0][2]['json'] == {'tagName': 'x'}


def test_client_empty_body_returns_none():
    http = FakeHttp(FakeResponse(204, None))
    assert ApiClient(http=http).delete('/api/Tag/1') is None


def test_client_error_uses_body_message():
    http = FakeHttp(FakeResponse(400, {'message': 'Name taken'}))

    with pytest.raises(ApiError) as exc:
        ApiClient(http=http).post('/api/Tag', {})

    assert exc.value.status == 400
    assert exc.value.message == 'Name taken'
    assert exc.value.data == {'message': 'Name taken'}


def test_client_error_without_json():
    http = FakeHttp(FakeResponse(500, ValueError('no json')))

    with pytest.raises(ApiError) as exc:
        ApiClient(http=http).get('/api/Tag')

    assert exc.value.status == 500
    assert exc.value.message == 'HTTP Error: 500'


def test_client_timeout_is_408():
    http = FakeHttp(raises=requests.Timeout())

    with pytest.raises(ApiError) as exc:
        ApiClient(http=http).get('/api/Tag')

    assert exc.value.status == 408
    assert exc.value.message == 'Request timeout'


def test_client_network_failure_is_status_zero():
    http = FakeHttp(raises=requests.ConnectionError('refused'))

    with pytest.raises(ApiError) as exc:
        ApiClient(http=http).get('/api/Tag')

    assert exc.value.status == 0
    assert 'refused' in exc.value.message


def test_client_401_flags_request(app):
    from flask import g

    http = FakeHttp(FakeResponse(401, {'message': 'expired'}))
    with app.test_request_context('/admin/news/'):
        with pytest.raises(ApiError):
            ApiClient(http=http).get('/api/NewsArticle')
        assert g.api_unauthorized is True


# ---------------------------------------------------------------------------
# LoggingService
# ---------------------------------------------------------------------------

def test_logs_are_persisted_and_filtered(app):
    with app.app_context():
        LoggingService.info('test', 'first')
        LoggingService.error('test', 'second', {'code': 1})

        logs = LoggingService.get_recent_logs(limit=10)
        assert [log['message'] for log in logs[:2]] == ['second', 'first']

        errors = LoggingService.get_recent_logs(level='error')
        assert len(errors) == 1
        assert '"code": 1' in errors[0]['details']
        assert LoggingService.count_errors_since(hours=1) == 1


def test_log_cleanup_keeps_recent_entries(app):
    with app.app_context():
        LoggingService.info('test', 'fresh')
        assert LoggingService.cleanup_old_logs(days_to_keep=1) == 0
        assert any(log['message'] == 'fresh' for log in LoggingService.get_recent_logs())


def test_server_errors_are_logged_with_traceback(app):
    with app.app_context():
        try:
            raise RuntimeError('exploded')
        except RuntimeError as e:
            LoggingService.log_error_with_traceback('test', e)

        entry = LoggingService.get_recent_logs(level='ERROR')[0]
        assert entry['message'] == 'Exception occurred: RuntimeError'
        assert 'exploded' in entry['details']


def test_common_queries():
    assert odata.news_by_status(NewsStatus.Inactive).to_params() == {'$filter': 'NewsStatus eq 0'}
    assert odata.search_news_title('exam').to_params()['$filter'] == "contains(NewsTitle, 'exam')"
    assert odata.search_news_content('exam').to_params()['$filter'] == "contains(NewsContent, 'exam')"
    assert odata.categories_by_parent(4).to_params()['$filter'] == 'ParentCategoryId eq 4'
    assert odata.root_categories().to_params()['$filter'] == 'ParentCategoryId eq null'
    assert odata.deleted_items().to_params() == {'$filter': 'IsDeleted eq true', '$orderby': 'CreatedDate desc'}
    assert '$top=3' in odata.latest_news(3).to_string()


def test_query_string_encodes_spaces():
    text = ODataQuery().filter(eq('CategoryId', 3)).order_by('CreatedDate', desc=True).to_string()

    assert ' ' not in text
    assert text == '$filter=CategoryId%20eq%203&$orderby=CreatedDate%20desc'
