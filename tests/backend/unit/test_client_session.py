"""
Unit tests for client.session module, with the server replaced by an httpx MockTransport.
"""
import httpx
import pytest

from review_portal.client.api import ApiError, ClientError, ReviewPortalClient
from review_portal.client.retry import RetryPolicy
from review_portal.client.session import SessionManager, SessionState, normalize_page
from review_portal.client.storage import MemoryStorage, SessionStorage


async def _no_sleep(seconds: float) -> None:
    return None


def make_manager(handler, storage=None):
    client = ReviewPortalClient(
        "http://api",
        RetryPolicy(max_attempts=2, interval=0),
        transport=httpx.MockTransport(handler),
        sleep=_no_sleep,
    )
    storage = storage or SessionStorage(primary=MemoryStorage())
    return SessionManager(client=client, storage=storage), storage


def signed_in_storage(token="tok"):
    storage = SessionStorage(primary=MemoryStorage())
    storage.save(token, {"id": "u1", "name": "Alice"})
    return storage


def test_normalize_page():
    assert normalize_page("/home") == "home"
    assert normalize_page("review.html") == "review"
    assert normalize_page("/static/service.html") == "service"
    assert normalize_page("/") == "index"


def test_session_state_from_storage():
    state = SessionState.from_storage(signed_in_storage("abc"))
    assert state.authenticated is True
    assert state.user_name == "Alice"
    assert SessionState().authenticated is False


@pytest.mark.asyncio
async def test_protected_page_without_token_redirects_without_calling_server():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(200, json={})

    manager, _ = make_manager(handler)
    result = await manager.load_page("/home")
    assert result.redirect == "login"
    assert result.state.authenticated is False
    assert calls == []


@pytest.mark.asyncio
async def test_public_page_without_token_stays():
    manager, _ = make_manager(lambda request: httpx.Response(200, json={}))
    result = await manager.load_page("index.html")
    assert result.redirect is None


@pytest.mark.asyncio
async def test_valid_token_keeps_session():
    def handler(request):
        assert request.url.path == "/api/verify"
        return httpx.Response(200, json={"valid": True, "user": {"userId": "u1"}})

    manager, storage = make_manager(handler, signed_in_storage())
    result = await manager.load_page("home")
    assert result.redirect is None
    assert result.state.authenticated is True
    assert storage.get_token() == "tok"


@pytest.mark.asyncio
@pytest.mark.parametrize("status_code", [401, 403])
async def test_rejected_token_clears_session_and_redirects(status_code):
    manager, storage = make_manager(
        lambda request: httpx.Response(status_code, json={"error": "nope"}),
        signed_in_storage(),
    )
    result = await manager.load_page("review")
    assert result.redirect == "login"
    assert result.state.authenticated is False
    assert storage.get_token() is None
    assert storage.get_user() is None


@pytest.mark.asyncio
async def test_rejected_token_on_public_page_clears_without_redirect():
    manager, storage = make_manager(
        lambda request: httpx.Response(403, json={"error": "nope"}),
        signed_in_storage(),
    )
    result = await manager.load_page("index")
    assert result.redirect is None
    assert storage.get_token() is None


@pytest.mark.asyncio
async def test_server_down_keeps_stored_session():
    def handler(request):
        raise httpx.ConnectError("down")

    manager, storage = make_manager(handler, signed_in_storage())
    result = await manager.load_page("home")
    assert result.redirect is None
    assert result.state.authenticated is True
    assert storage.get_token() == "tok"


@pytest.mark.asyncio
async def test_login_persists_token_and_user():
    def handler(request):
        return httpx.Response(200, json={"token": "new-tok", "userId": "u9", "name": "Zed", "message": "ok"})

    manager, storage = make_manager(handler)
    state = await manager.login("zed@x.com", "secret1")
    assert state.token == "new-tok"
    assert storage.get_user() == {"id": "u9", "name": "Zed"}


@pytest.mark.asyncio
async def test_failed_login_leaves_storage_untouched():
    manager, storage = make_manager(lambda request: httpx.Response(401, json={"error": "Invalid credentials"}))
    with pytest.raises(ApiError) as excinfo:
        await manager.login("zed@x.com", "wrong1")
    assert excinfo.value.message == "Invalid credentials"
    assert storage.get_token() is None


@pytest.mark.asyncio
async def test_logout_clears_even_if_server_unreachable():
    def handler(request):
        raise httpx.ConnectError("down")

    manager, storage = make_manager(handler, signed_in_storage())
    state = await manager.logout()
    assert state.authenticated is False
    assert storage.get_token() is None


@pytest.mark.asyncio
async def test_submit_review_requires_session():
    manager, _ = make_manager(lambda request: httpx.Response(201, json={}))
    with pytest.raises(ClientError, match="log in"):
        await manager.submit_review("Alice", "Great visit", 5)


@pytest.mark.asyncio
async def test_submit_review_with_expired_session_signs_out():
    manager, storage = make_manager(
        lambda request: httpx.Response(403, json={"error": "Invalid or expired token"}),
        signed_in_storage(),
    )
    with pytest.raises(ApiError):
        await manager.submit_review("Alice", "Great visit", 5)
    assert storage.get_token() is None
