import asyncio

import httpx
import pytest
from httpx import ASGITransport

from notes_client.errors import MalformedResponse, NetworkOrServerError, NotFound, Unauthorized
from notes_client.gateway import ApiGateway
from notes_client.models import LoginResult
from notes_client.session import SessionStore
from tests.fake_backend import ADMIN_TOKEN, create_app

ADMIN_LOGIN = LoginResult.model_validate(
    {"token": ADMIN_TOKEN, "user": {"id": 1, "email": "admin@example.com", "role": "admin"}}
)


@pytest.fixture
def session_store() -> SessionStore:
    store = SessionStore()
    store.save(ADMIN_LOGIN)
    return store


@pytest.fixture
def prompts() -> list[str]:
    return []


@pytest.fixture
async def gateway(backend, session_store, prompts):
    async with ApiGateway(
        "http://test",
        session_store,
        transport=ASGITransport(app=create_app(backend)),
        on_reauth_required=lambda: prompts.append("login"),
    ) as gateway:
        yield gateway


async def test_call_attaches_bearer_token(gateway, backend) -> None:
    payload = await gateway.call("/api/categories/tree")

    assert [node["name"] for node in payload] == ["Medicine", "Surgery"]
    assert backend.requests[-1].authorization == f"Bearer {ADMIN_TOKEN}"


async def test_call_without_auth_sends_no_token(gateway, backend) -> None:
    await gateway.call(
        "/api/login",
        "POST",
        {"email": "admin@example.com", "password": "secret"},
        auth=False,
    )

    assert backend.requests[-1].authorization is None


async def test_no_content_returns_none(gateway) -> None:
    assert await gateway.call("/api/note/10", "DELETE") is None


async def test_not_found_uses_backend_message(gateway) -> None:
    with pytest.raises(NotFound) as exc:
        await gateway.call("/api/note/999")

    assert exc.value.detail == "Note not found."
    assert exc.value.status_code == 404


async def test_server_error_uses_backend_message(gateway, backend) -> None:
    backend.fail_tree = True

    with pytest.raises(NetworkOrServerError) as exc:
        await gateway.call("/api/categories/tree")

    assert exc.value.status_code == 500
    assert exc.value.detail == "Tree unavailable."


async def test_unauthorized_clears_session_and_prompts_once(
    gateway, backend, session_store, prompts
) -> None:
    backend.valid_tokens.clear()

    with pytest.raises(Unauthorized):
        await gateway.call("/api/categories/tree")

    assert session_store.current is None
    assert prompts == ["login"]
    assert len(backend.calls("/api/categories/tree")) == 1


async def test_each_sequential_unauthorized_call_prompts(gateway, backend, prompts) -> None:
    backend.valid_tokens.clear()

    for category_id in (1, 2):
        with pytest.raises(Unauthorized):
            await gateway.call("/api/notes", params={"category": category_id})

    assert prompts == ["login", "login"]


async def test_concurrent_unauthorized_calls_share_one_prompt(session_store, prompts) -> None:
    arrived = []
    both_arrived = asyncio.Event()

    async def handler(request: httpx.Request) -> httpx.Response:
        arrived.append(request.url.path)
        if len(arrived) == 2:
            both_arrived.set()
        await both_arrived.wait()
        return httpx.Response(401, json={"message": "Token expired."})

    async with ApiGateway(
        "http://test",
        session_store,
        transport=httpx.MockTransport(handler),
        on_reauth_required=lambda: prompts.append("login"),
    ) as gateway:
        results = await asyncio.gather(
            gateway.call("/api/categories/tree"),
            gateway.call("/api/notes", params={"category": 1}),
            return_exceptions=True,
        )
        assert [type(result) for result in results] == [Unauthorized, Unauthorized]
        assert prompts == ["login"]

        with pytest.raises(Unauthorized):
            await gateway.call("/api/categories/tree")

    assert prompts == ["login", "login"]
    assert session_store.current is None


async def test_forbidden_is_a_server_error(backend) -> None:
    store = SessionStore()
    store.save(
        LoginResult.model_validate(
            {"token": "user-token", "user": {"id": 2, "email": "reader@example.com", "role": "user"}}
        )
    )
    async with ApiGateway(
        "http://test", store, transport=ASGITransport(app=create_app(backend))
    ) as gateway:
        with pytest.raises(NetworkOrServerError) as exc:
            await gateway.call("/api/admin_stats")

    assert exc.value.status_code == 403
    assert exc.value.detail == "Admin only."
    assert store.current is not None


def _mock_gateway(handler) -> ApiGateway:
    return ApiGateway("http://test", SessionStore(), transport=httpx.MockTransport(handler))


async def test_transport_failure_is_a_network_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    async with _mock_gateway(handler) as gateway:
        with pytest.raises(NetworkOrServerError) as exc:
            await gateway.call("/api/categories/tree")

    assert exc.value.status_code is None


async def test_plain_text_error_body_becomes_message() -> None:
    async with _mock_gateway(lambda request: httpx.Response(502, text="Bad gateway")) as gateway:
        with pytest.raises(NetworkOrServerError) as exc:
            await gateway.call("/api/categories/tree")

    assert exc.value.detail == "Bad gateway"


async def test_empty_error_body_gets_generic_message() -> None:
    async with _mock_gateway(lambda request: httpx.Response(503)) as gateway:
        with pytest.raises(NetworkOrServerError) as exc:
            await gateway.call("/api/categories/tree")

    assert exc.value.detail == "HTTP 503"


async def test_non_json_success_body_is_malformed() -> None:
    async with _mock_gateway(lambda request: httpx.Response(200, text="<html>")) as gateway:
        with pytest.raises(MalformedResponse):
            await gateway.call("/api/categories/tree")
