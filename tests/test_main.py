import pytest
from httpx import ASGITransport

from notes_client.config import Settings, settings_from_env
from notes_client.main import create_app
from notes_client.navigation import Page
from notes_client.session import TOKEN_KEY, USER_KEY
from tests.fake_backend import USER_TOKEN, create_app as create_backend_app


async def test_start_restores_session_and_loads_tree(backend, settings) -> None:
    storage = {
        TOKEN_KEY: USER_TOKEN,
        USER_KEY: '{"id": 2, "email": "reader@example.com", "role": "user"}',
    }
    app = create_app(
        settings, storage=storage, transport=ASGITransport(app=create_backend_app(backend))
    )
    async with app:
        await app.start()

        assert app.auth.current_user.email == "reader@example.com"
        assert [entry.path for entry in app.tree_cache.flatten()] == [
            "Medicine",
            "Medicine::Cardiology",
            "Medicine::Cardiology::Arrhythmia",
            "Surgery",
        ]
        assert app.navigator.state.current_page is Page.home


async def test_anonymous_start_prompts_login_once(notes_app, backend, reauth_prompts) -> None:
    await notes_app.start()

    assert notes_app.tree_cache.has_snapshot is False
    assert notes_app.navigator.state.current_page is Page.home
    assert reauth_prompts == ["login"]


async def test_refetching_unchanged_backend_is_idempotent(reader_app) -> None:
    first = (await reader_app.tree_cache.fetch_tree()).flatten()
    second = (await reader_app.tree_cache.fetch_tree()).flatten()

    assert first == second


def test_create_app_reads_settings_from_env(monkeypatch) -> None:
    monkeypatch.setenv("NOTES_API_BASE_URL", "https://notes.example.com/")

    app = create_app()

    assert app.settings.api_base_url == "https://notes.example.com"


def test_settings_from_env_defaults() -> None:
    settings = settings_from_env({"NOTES_API_BASE_URL": "http://localhost:5000"})

    assert settings == Settings(api_base_url="http://localhost:5000")


def test_settings_from_env_overrides() -> None:
    settings = settings_from_env(
        {
            "NOTES_API_BASE_URL": "http://localhost:5000",
            "NOTES_API_TIMEOUT": "3.5",
            "NOTES_SEARCH_DEBOUNCE": "0.1",
        }
    )

    assert settings.request_timeout == 3.5
    assert settings.search_debounce == 0.1


def test_settings_require_base_url() -> None:
    with pytest.raises(RuntimeError):
        settings_from_env({})


def test_settings_reject_malformed_numbers() -> None:
    with pytest.raises(RuntimeError) as exc:
        settings_from_env({"NOTES_API_BASE_URL": "http://x", "NOTES_API_TIMEOUT": "soon"})

    assert "NOTES_API_TIMEOUT" in str(exc.value)
