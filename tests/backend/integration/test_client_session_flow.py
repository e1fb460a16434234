"""
The client session manager driving the real API through an in-process transport.
"""
import pytest
from httpx import ASGITransport

from review_portal.client import (
    ApiError,
    FileStorage,
    RetryPolicy,
    ReviewPortalClient,
    SessionManager,
    SessionStorage,
)
from review_portal.client.render import render_review_list, ui_visibility
from review_portal.main import app


pytestmark = pytest.mark.asyncio


@pytest.fixture
def manager(client, tmp_path):
    # `client` initialises the database for this test
    api = ReviewPortalClient(
        "http://testserver",
        RetryPolicy(max_attempts=1, interval=0),
        transport=ASGITransport(app=app),
    )
    storage = SessionStorage(primary=FileStorage(tmp_path / "session.json"))
    return SessionManager(client=api, storage=storage)


async def test_full_session_lifecycle(manager):
    start = await manager.load_page("/home")
    assert start.redirect == "login"
    assert ui_visibility(start.state)["logoutBtn"] is False

    state = await manager.register("Alice", "alice@x.com", "secret1")
    assert state.authenticated
    assert ui_visibility(state)["reviewForm"] is True

    home = await manager.load_page("/home")
    assert home.redirect is None
    assert home.state.user_name == "Alice"

    created = await manager.submit_review("Alice", "Great <b>visit</b>", 5)
    assert created["review"]["author"] == "Alice"

    feed = await manager.load_reviews(page=1, limit=10)
    assert feed["reviews"][0]["id"] == created["review"]["id"]
    markup = render_review_list(feed["reviews"])
    assert "Great &lt;b&gt;visit&lt;/b&gt;" in markup

    token = manager.current_state().token
    await manager.logout()
    assert manager.current_state().authenticated is False

    # The revoked token no longer verifies
    with pytest.raises(ApiError) as excinfo:
        await manager.client.verify(token)
    assert excinfo.value.status_code == 403

    await manager.client.aclose()


async def test_login_with_wrong_password(manager):
    await manager.register("Bob", "bob@x.com", "secret1")
    await manager.logout()

    with pytest.raises(ApiError) as excinfo:
        await manager.login("bob@x.com", "nope-nope")
    assert excinfo.value.status_code == 401
    assert excinfo.value.message == "Invalid credentials"

    state = await manager.login("BOB@x.com", "secret1")
    assert state.user_name == "Bob"
    await manager.client.aclose()
