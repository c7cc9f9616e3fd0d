import pytest
from httpx import ASGITransport
from pydantic import TypeAdapter

from notes_client.config import Settings
from notes_client.main import create_app
from notes_client.models import CategoryNode
from tests.fake_backend import FakeBackend, create_app as create_backend_app

_nodes = TypeAdapter(list[CategoryNode])

SAMPLE_TREE = [
    {
        "id": 1,
        "name": "Medicine",
        "parent_id": None,
        "children": [
            {
                "id": 2,
                "name": "Cardiology",
                "parent_id": 1,
                "children": [{"id": 3, "name": "Arrhythmia", "parent_id": 2, "children": []}],
            },
            {"id": 5, "name": "Neurology", "parent_id": 1, "children": []},
        ],
    },
    {"id": 4, "name": "Surgery", "parent_id": None, "children": []},
]


def build_nodes(payload: list[dict]) -> list[CategoryNode]:
    return _nodes.validate_python(payload)


class StubTreeSource:
    def __init__(self, *responses) -> None:
        self.responses = list(responses)
        self.calls = 0

    async def get_tree(self) -> list[CategoryNode]:
        self.calls += 1
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return build_nodes(response)


@pytest.fixture
def backend() -> FakeBackend:
    backend = FakeBackend()
    backend.add_category(1, "Medicine", description="Clinical notes")
    backend.add_category(2, "Cardiology", parent_id=1)
    backend.add_category(3, "Arrhythmia", parent_id=2)
    backend.add_category(4, "Surgery")
    backend.add_note(10, "Atrial fibrillation", category_id=3, views=5)
    backend.add_note(11, "Heart failure", category_id=2, views=9)
    backend.add_note(12, "Appendicitis", category_id=4, views=1)
    backend.add_note(13, "Medication dosing", category_id=2, views=3)
    return backend


@pytest.fixture
def settings() -> Settings:
    return Settings(api_base_url="http://test", search_debounce=0.01)


@pytest.fixture
def storage() -> dict[str, str]:
    return {}


@pytest.fixture
def reauth_prompts() -> list[str]:
    return []


@pytest.fixture
async def notes_app(backend, settings, storage, reauth_prompts):
    app = create_app(
        settings,
        storage=storage,
        transport=ASGITransport(app=create_backend_app(backend)),
        on_reauth_required=lambda: reauth_prompts.append("login"),
    )
    async with app:
        yield app


@pytest.fixture
async def admin_app(notes_app, backend):
    await notes_app.auth.login("admin@example.com", "secret")
    await notes_app.tree_cache.fetch_tree()
    backend.requests.clear()
    return notes_app


@pytest.fixture
async def reader_app(notes_app, backend):
    await notes_app.auth.login("reader@example.com", "hunter2")
    await notes_app.tree_cache.fetch_tree()
    backend.requests.clear()
    return notes_app
