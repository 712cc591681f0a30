"""
OData Queries
=============

Builds $filter/$orderby/$top/$skip/$expand/$select/$count parameters and
unwraps the collection shapes the backend returns.
"""

from enum import Enum
from urllib.parse import quote, urlencode

ODATA_PARAMS = {
    'ORDER_BY': '$orderby',
    'FILTER': '$filter',
    'TOP': '$top',
    'SKIP': '$skip',
    'SELECT': '$select',
    'EXPAND': '$expand',
    'COUNT': '$count',
}


def literal(value):
    """Format a Python value as an OData literal"""
    if value is None:
        return 'null'
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, Enum):
        value = value.value
    if isinstance(value, (int, float)):
        return str(value)
    text = str(value).replace("'", "''")
    return f"'{text}'"


def eq(field, value):
    return f"{field} eq {literal(value)}"


def contains(field, keyword):
    return f"contains({field}, {literal(keyword)})"


class ODataQuery:
    """Chainable OData query builder.

    Example:
        ODataQuery().filter(eq('CategoryId', 3)).order_by('CreatedDate', desc=True).page(2, 10)
    """

    def __init__(self):
        self._filters = []
        self._order_by = []
        self._top = None
        self._skip = None
        self._expand = []
        self._select = []
        self._count = False

    def filter(self, expression):
        if expression:
            self._filters.append(expression)
        return self

    def order_by(self, field, desc=False):
        self._order_by.append(f"{field} desc" if desc else field)
        return self

    def top(self, n):
        self._top = int(n)
        return self

    def skip(self, n):
        self._skip = int(n)
        return self

    def page(self, page, limit):
        page = max(int(page), 1)
        return self.top(limit).skip((page - 1) * int(limit))

    def expand(self, *navigations):
        self._expand.extend(navigations)
        return self

    def select(self, *fields):
        self._select.extend(fields)
        return self

    def count(self, enabled=True):
        self._count = enabled
        return self

    def filter_expression(self):
        if len(self._filters) == 1:
            return self._filters[0]
        # Parenthesise compound clauses so OR terms don't leak across AND
        return ' and '.join(
            f"({f})" if ' or ' in f else f for f in self._filters
        )

    def to_params(self):
        params = {}
        if self._filters:
            params[ODATA_PARAMS['FILTER']] = self.filter_expression()
        if self._order_by:
            params[ODATA_PARAMS['ORDER_BY']] = ','.join(self._order_by)
        if self._top is not None:
            params[ODATA_PARAMS['TOP']] = self._top
        if self._skip is not None:
            params[ODATA_PARAMS['SKIP']] = self._skip
        if self._expand:
            params[ODATA_PARAMS['EXPAND']] = ','.join(self._expand)
        if self._select:
            params[ODATA_PARAMS['SELECT']] = ','.join(self._select)
        if self._count:
            params[ODATA_PARAMS['COUNT']] = 'true'
        return params

    def to_string(self):
        return urlencode(self.to_params(), safe="$,'()", quote_via=quote)

    def __str__(self):
        return self.to_string()


def as_params(query):
    """Accept an ODataQuery, a params dict or None"""
    if query is None:
        return None
    if isinstance(query, ODataQuery):
        return query.to_params()
    return dict(query)


# ===== Common queries =====

def latest_news(limit=10):
    return ODataQuery().order_by('CreatedDate', desc=True).top(limit)


def news_by_category(category_id):
    return ODataQuery().filter(eq('CategoryId', category_id))


def news_by_status(status):
    return ODataQuery().filter(eq('NewsStatus', status))


def active_news_only():
    return ODataQuery().filter(eq('NewsStatus', 1))


def search_news_title(keyword):
    return ODataQuery().filter(contains('NewsTitle', keyword))


def search_news_content(keyword):
    return ODataQuery().filter(contains('NewsContent', keyword))


def keyword_filter(keyword):
    """Title-or-content match used by every news search"""
    return f"{contains('NewsTitle', keyword)} or {contains('NewsContent', keyword)}"


def active_categories():
    return ODataQuery().filter(eq('IsActive', True))


def inactive_categories():
    return ODataQuery().filter(eq('IsActive', False))


def root_categories():
    return ODataQuery().filter(eq('ParentCategoryId', None))


def categories_by_parent(parent_id):
    return ODataQuery().filter(eq('ParentCategoryId', parent_id))


def search_tags(keyword):
    return ODataQuery().filter(contains('TagName', keyword))


def popular_tags(limit=10):
    return ODataQuery().order_by('ArticleCount', desc=True).top(limit)


def active_accounts():
    return ODataQuery().filter(eq('IsActive', True))


def inactive_accounts():
    return ODataQuery().filter(eq('IsActive', False))


def accounts_by_role(role):
    return ODataQuery().filter(eq('AccountRole', role))


def deleted_items():
    return ODataQuery().filter(eq('IsDeleted', True)).order_by('CreatedDate', desc=True)


# ===== Response unwrapping =====

def unwrap_collection(response):
    """Return the list inside any of the collection shapes the backend uses"""
    if response is None:
        return []
    if isinstance(response, list):
        return response
    if not isinstance(response, dict):
        return []
    if isinstance(response.get('$values'), list):
        return response['$values']
    if isinstance(response.get('value'), list):
        return response['value']
    data = response.get('data')
    if isinstance(data, list):
        return data
    if isinstance(data, dict):
        if isinstance(data.get('$values'), list):
            return data['$values']
        if isinstance(data.get('value'), list):
            return data['value']
    return []


def unwrap_single(response):
    """Return the entity inside an {success, data, ...} envelope"""
    if isinstance(response, dict) and 'data' in response and (
        'success' in response or 'statusCode' in response or len(response) == 1
    ):
        return response['data']
    return response


def extract_count(response, fallback=0):
    """Read the total count from an OData response"""
    if isinstance(response, dict):
        for key in ('@odata.count', 'totalCount', 'count'):
            if isinstance(response.get(key), int):
                return response[key]
        data = response.get('data')
        if isinstance(data, dict):
            for key in ('@odata.count', 'totalCount', 'count'):
                if isinstance(data.get(key), int):
                    return data[key]
    return fallback
