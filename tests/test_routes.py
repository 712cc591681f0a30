"""
Route tests. Services are patched where the route module imports them,
so no backend is contacted.
"""

from unittest.mock import MagicMock, patch

from funews.core.errors import ApiError
from funews.core.models import AccountRole, LoginResponse, NewsArticle, TrashItem, TrashStatistics

from conftest import sign_in


# ---------------------------------------------------------------------------
# Auth
# ---------------------------------------------------------------------------

def test_login_page_renders(client):
    response = client.get("/auth/login")
    assert response.status_code == 200
    assert b'name="email"' in response.data


def test_login_validation_skips_api(client):
    with patch("funews.modules.auth.routes.AuthService") as auth:
        response = client.post("/auth/login", data={"email": "nope", "password": ""})

    assert response.status_code == 400
    assert b"Please enter a valid email address" in response.data
    assert b"Password is required" in response.data
    auth.assert_not_called()


def test_login_success_redirects_by_role(client):
    login = LoginResponse('a', 'r', account_id=1, account_name='Ada', account_role=AccountRole.Admin)
    with patch("funews.modules.auth.routes.AuthService") as auth:
        auth.return_value.login.return_value = login
        response = client.post("/auth/login", data={"email": "ada@funews.test", "password": "secret1"})

    assert response.status_code == 302
    assert "/admin" in response.headers["Location"]


def test_login_success_follows_local_next(client):
    login = LoginResponse('a', 'r', account_id=3, account_name='Lin', account_role=AccountRole.Lecturer)
    with patch("funews.modules.auth.routes.AuthService") as auth:
        auth.return_value.login.return_value = login
        response = client.post("/auth/login?next=/profile/",
                               data={"email": "lin@funews.test", "password": "secret1"})

    assert response.headers["Location"].endswith("/profile/")


def test_login_ignores_external_next(client):
    login = LoginResponse('a', 'r', account_id=3, account_name='Lin', account_role=AccountRole.Lecturer)
    with patch("funews.modules.auth.routes.AuthService") as auth:
        auth.return_value.login.return_value = login
        response = client.post("/auth/login?next=//evil.example",
                               data={"email": "lin@funews.test", "password": "secret1"})

    assert "evil.example" not in response.headers["Location"]


def test_login_ignores_backslash_next(client):
    login = LoginResponse('a', 'r', account_id=3, account_name='Lin', account_role=AccountRole.Lecturer)
    with patch("funews.modules.auth.routes.AuthService") as auth:
        auth.return_value.login.return_value = login
        response = client.post("/auth/login", data={
            "email": "lin@funews.test",
            "password": "secret1",
            "next": "/\\evil.example",
        })

    assert response.status_code == 302
    assert "evil.example" not in response.headers["Location"]


def test_register_creates_lecturer(client):
    with patch("funews.modules.accounts.service.AccountService") as accounts:
        response = client.post("/auth/register", data={
            "account_name": "New Lecturer",
            "account_email": "lecturer@funews.test",
            "account_password": "secret123",
            "confirm_password": "secret123",
        })

    assert response.status_code == 302
    assert "/auth/login" in response.headers["Location"]
    payload = accounts.return_value.create_account.call_args[0][0]
    assert payload["accountRole"] == int(AccountRole.Lecturer)
    assert payload["accountEmail"] == "lecturer@funews.test"


def test_login_failure_shows_backend_message(client):
    with patch("funews.modules.auth.routes.AuthService") as auth:
        auth.return_value.login.side_effect = ApiError("Invalid email or password", 401)
        response = client.post("/auth/login", data={"email": "ada@funews.test", "password": "wrong1"})

    assert response.status_code == 401
    assert b"Invalid email or password" in response.data


# ---------------------------------------------------------------------------
# Expired token -- a backend 401 signs the visitor out
# ---------------------------------------------------------------------------

class UnauthorizedResponse:
    status_code = 401
    ok = False
    content = b'{"message": "Token expired"}'
    headers = {'content-type': 'application/json'}

    def json(self):
        return {'message': 'Token expired'}


def test_backend_401_signs_out(admin_client):
    http = MagicMock()
    http.request.return_value = UnauthorizedResponse()

    with patch("funews.core.api.requests.Session", return_value=http):
        response = admin_client.get("/admin/news/", follow_redirects=False)

    assert response.status_code == 302
    assert "/auth/login" in response.headers["Location"]
    with admin_client.session_transaction() as sess:
        assert "access_token" not in sess


# ---------------------------------------------------------------------------
# Accounts
# ---------------------------------------------------------------------------

def test_invalid_account_email_is_not_submitted(admin_client):
    with patch("funews.modules.accounts.routes.AccountService") as accounts:
        response = admin_client.post("/admin/accounts/create", data={
            "account_name": "New Staff",
            "account_email": "not-an-email",
            "account_password": "secret1",
            "account_role": "1",
        })

    assert response.status_code == 400
    assert b"Please enter a valid email address" in response.data
    accounts.assert_not_called()


def test_valid_account_is_created(admin_client):
    with patch("funews.modules.accounts.routes.AccountService") as accounts:
        response = admin_client.post("/admin/accounts/create", data={
            "account_name": "New Staff",
            "account_email": "staff@funews.test",
            "account_password": "secret1",
            "account_role": "1",
            "is_active": "on",
        })

    assert response.status_code == 302
    payload = accounts.return_value.create_account.call_args[0][0]
    assert payload["accountEmail"] == "staff@funews.test"
    assert payload["accountRole"] == 1
    assert payload["accountPassword"] == "secret1"


def test_admin_cannot_deactivate_self(admin_client):
    with patch("funews.modules.accounts.routes.AccountService") as accounts:
        response = admin_client.post("/admin/accounts/1/toggle")

    assert response.status_code == 302
    accounts.return_value.toggle_account_status.assert_not_called()


# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------

def test_non_decimal_parent_is_ignored(staff_client):
    with patch("funews.modules.categories.routes.CategoryService") as categories:
        categories.return_value.get_root_categories.return_value = []
        response = staff_client.post("/admin/categories/create", data={
            "category_name": "Research",
            "category_description": "Lab news",
            "parent_category_id": "²",
            "is_active": "on",
        })

    assert response.status_code == 302
    payload = categories.return_value.create_category.call_args[0][0]
    assert payload["categoryName"] == "Research"
    assert payload["parentCategoryId"] is None


# ---------------------------------------------------------------------------
# Public site and JSON feed
# ---------------------------------------------------------------------------

def sample_article():
    return NewsArticle.from_api({
        'newsArticleId': 1,
        'newsTitle': 'Exam week',
        'newsContent': 'Exams start on Monday.',
        'categoryId': 2,
        'categoryName': 'Campus',
        'createdDate': '2024-03-05T10:00:00Z',
        'newsStatus': 1,
    })


def test_home_page_renders(client):
    with patch("funews.modules.news_public.routes.NewsService") as news, \
            patch("funews.modules.news_public.routes.CategoryService") as categories:
        news.return_value.get_latest_news.return_value = [sample_article()]
        news.return_value.get_featured_news.return_value = []
        categories.return_value.get_active_categories.return_value = []
        response = client.get("/")

    assert response.status_code == 200
    assert b"Exam week" in response.data


def test_home_page_shows_error_banner(client):
    with patch("funews.modules.news_public.routes.NewsService") as news, \
            patch("funews.modules.news_public.routes.CategoryService") as categories:
        news.return_value.get_latest_news.side_effect = ApiError("Request timeout", 408)
        news.return_value.get_featured_news.return_value = []
        categories.return_value.get_active_categories.return_value = []
        response = client.get("/")

    assert response.status_code == 200
    assert b"Request timeout" in response.data


def test_missing_category_is_404(client):
    with patch("funews.modules.news_public.routes.CategoryService") as categories:
        categories.return_value.get_category_by_id.side_effect = ApiError("Not found", 404)
        response = client.get("/category/99")

    assert response.status_code == 404


def test_latest_news_json(client):
    with patch("funews.modules.news_public.routes.NewsService") as news:
        news.return_value.get_latest_news.return_value = [sample_article()]
        response = client.get("/api/news/latest?limit=5", headers={"Origin": "http://campus.example"})

    assert response.status_code == 200
    data = response.get_json()
    assert data["count"] == 1
    assert data["articles"][0]["news_title"] == "Exam week"
    assert "Access-Control-Allow-Origin" in response.headers
    news.return_value.get_latest_news.assert_called_once_with(5)


def test_latest_news_json_backend_error(client):
    with patch("funews.modules.news_public.routes.NewsService") as news:
        news.return_value.get_latest_news.side_effect = ApiError("boom", 500)
        response = client.get("/api/news/latest")

    assert response.status_code == 500
    assert "error" in response.get_json()


def test_search_json_rejects_short_keyword(client):
    response = client.get("/api/news/search?q=a")
    assert response.status_code == 400


def test_unknown_page_is_404(client):
    response = client.get("/no/such/page")
    assert response.status_code == 404
    assert b"not found" in response.data


# ---------------------------------------------------------------------------
# Delete confirmation and trash
# ---------------------------------------------------------------------------

def test_soft_delete_needs_confirmation(staff_client):
    with patch("funews.modules.tags.routes.TagService") as tags:
        page = staff_client.get("/admin/tags/3/delete")
        cancelled = staff_client.post("/admin/tags/3/delete", data={})
        tags.return_value.delete_tag.assert_not_called()

        confirmed = staff_client.post("/admin/tags/3/delete", data={"confirm": "yes"})

    assert page.status_code == 200
    assert b"Move to trash?" in page.data
    assert cancelled.status_code == 302
    assert confirmed.status_code == 302
    tags.return_value.delete_tag.assert_called_once_with(3)


def test_staff_cannot_hard_delete(staff_client):
    with patch("funews.modules.tags.routes.TagService") as tags:
        page = staff_client.get("/admin/tags/3/hard-delete")
        post = staff_client.post("/admin/tags/3/hard-delete", data={"confirm": "yes"})

    assert page.status_code == 302
    assert post.status_code == 302
    tags.return_value.hard_delete_tag.assert_not_called()


def test_admin_hard_delete(admin_client):
    with patch("funews.modules.tags.routes.TagService") as tags:
        response = admin_client.post("/admin/tags/3/hard-delete", data={"confirm": "yes"})

    assert response.status_code == 302
    tags.return_value.hard_delete_tag.assert_called_once_with(3)


def trash_items():
    return [
        TrashItem(1, 'news', 'Old news', '2024-03-03T00:00:00Z', 'Staff'),
        TrashItem(3, 'tag', 'old-tag', '2024-03-01T00:00:00Z'),
    ]


def test_trash_list_for_staff(staff_client):
    items = trash_items()
    with patch("funews.modules.trash.routes.TrashService") as trash:
        trash.return_value.get_trash_items.return_value = items
        trash.return_value.get_trash_statistics.return_value = TrashStatistics.from_items(items)
        response = staff_client.get("/admin/trash/")

    assert response.status_code == 200
    assert b"Old news" in response.data
    assert b"Delete permanently" not in response.data
    trash.return_value.get_trash_items.assert_called_once_with(AccountRole.Staff)


def test_trash_filter_by_type(admin_client):
    items = trash_items()
    with patch("funews.modules.trash.routes.TrashService") as trash:
        trash.return_value.get_trash_items.return_value = items
        trash.return_value.get_trash_statistics.return_value = TrashStatistics.from_items(items)
        response = admin_client.get("/admin/trash/?type=tag")

    assert b"old-tag" in response.data
    assert b"Old news" not in response.data


def test_staff_cannot_purge_from_trash(staff_client):
    with patch("funews.modules.trash.routes.TrashService") as trash:
        response = staff_client.post("/admin/trash/news/1/delete", data={"confirm": "yes"})

    assert response.status_code == 302
    trash.return_value.permanent_delete.assert_not_called()


def test_restore_from_trash(staff_client):
    item = trash_items()[0]
    with patch("funews.modules.trash.routes.TrashService") as trash:
        trash.return_value.find_item.return_value = item
        response = staff_client.post("/admin/trash/news/1/restore")

    assert response.status_code == 302
    trash.return_value.restore_item.assert_called_once_with(item)


# ---------------------------------------------------------------------------
# Dashboard and profile
# ---------------------------------------------------------------------------

def test_statistics_rejects_bad_dates(admin_client):
    with patch("funews.modules.dashboard.routes.AccountService") as accounts:
        response = admin_client.get("/admin/statistics?start=2024-05-01&end=2024-04-01")

    assert response.status_code == 200
    assert b"Start date must be before end date" in response.data
    accounts.return_value.get_statistics_report.assert_not_called()


def test_password_change_mismatch(client):
    sign_in(client, AccountRole.Lecturer, account_id=3)
    with patch("funews.modules.profile.routes.AccountService") as accounts:
        response = client.post("/profile/password", data={
            "old_password": "secret1",
            "new_password": "secret22",
            "confirm_password": "secret23",
        })

    assert response.status_code == 400
    assert b"Passwords do not match" in response.data
    accounts.assert_not_called()
