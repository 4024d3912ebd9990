try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

try:
    from ._github_fake import VALID_TOKEN, FakeGitHub
except Exception:  # pragma: no cover
    from _github_fake import VALID_TOKEN, FakeGitHub  # type: ignore

import httpx
import pytest

from app.clients.github_contents import GitHubContentsClient
from app.core.config import GitHubSettings, PublishingSettings
from app.dependencies import get_session_token_service
from app.main import app
from app.services.publisher import ContentPublisher
from app.services.repository_bindings import RepositoryBindingStore, parse_repository_url
from app.services.scaffolder import DirectoryScaffolder
from app.services.token_registry import TokenRegistry

USER_ID = 583231


@pytest.fixture()
def upload_env():
    from app import dependencies

    fake = FakeGitHub()
    registry = TokenRegistry()
    bindings = RepositoryBindingStore()
    contents = GitHubContentsClient(GitHubSettings(), transport=fake.transport())
    publisher = ContentPublisher(
        token_registry=registry,
        binding_store=bindings,
        contents_client=contents,
        scaffolder=DirectoryScaffolder(contents, branch="main"),
        settings=PublishingSettings(),
    )

    app.dependency_overrides.update(
        {
            dependencies.get_token_registry: lambda: registry,
            dependencies.get_repository_binding_store: lambda: bindings,
            dependencies.get_content_publisher: lambda: publisher,
        }
    )

    yield fake, registry, bindings

    app.dependency_overrides.clear()


def _auth_headers() -> dict[str, str]:
    token = get_session_token_service().issue(
        user_id=USER_ID, github_id="octocat", email="octocat@github.com"
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.mark.anyio
async def test_requests_without_session_token_get_401_envelope(upload_env):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post("/api/github/upload", json={"content": "# TIL"})

    assert response.status_code == 401
    assert response.json() == {"message": "invalid_token", "data": None}


@pytest.mark.anyio
async def test_parse_url_registers_binding(upload_env):
    _, _, bindings = upload_env

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/parse/github-url",
            json={"repository_url": "https://github.com/alice/notes.git"},
            headers=_auth_headers(),
        )

    assert response.status_code == 200
    assert response.json() == {
        "message": "parse_success",
        "data": {"owner": "alice", "repo": "notes"},
    }
    assert bindings.get(USER_ID).full_name == "alice/notes"


@pytest.mark.anyio
async def test_parse_url_rejects_non_github_url(upload_env):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/parse/github-url",
            json={"repository_url": "https://gitlab.com/alice/notes"},
            headers=_auth_headers(),
        )

    assert response.status_code == 400
    assert response.json() == {"message": "invalid_repository_url", "data": None}


@pytest.mark.anyio
async def test_upload_without_github_token_is_401(upload_env):
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/github/upload", json={"content": "# TIL"}, headers=_auth_headers()
        )

    assert response.status_code == 401
    assert response.json() == {"message": "github_token_missing", "data": None}


@pytest.mark.anyio
async def test_upload_without_registered_repository_is_400(upload_env):
    _, registry, _ = upload_env
    registry.store(USER_ID, VALID_TOKEN)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/github/upload", json={"content": "# TIL"}, headers=_auth_headers()
        )

    assert response.status_code == 400
    assert response.json()["message"] == "repository_not_registered"


@pytest.mark.anyio
async def test_register_then_upload_creates_then_updates(upload_env):
    fake, registry, _ = upload_env
    registry.store(USER_ID, VALID_TOKEN)
    headers = _auth_headers()

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        await client.post(
            "/api/parse/github-url",
            json={"repository_url": "https://github.com/alice/notes"},
            headers=headers,
        )
        first = await client.post(
            "/api/github/upload",
            json={"content": "# One", "path": "2024/custom.md"},
            headers=headers,
        )
        second = await client.post(
            "/api/github/upload",
            json={"content": "# Two", "path": "2024/custom.md"},
            headers=headers,
        )
        me = await client.get("/api/auth/me", headers=headers)

    assert first.status_code == 200
    assert first.json() == {
        "message": "upload_success",
        "data": {
            "url": "https://github.com/alice/notes/blob/main/2024/custom.md",
            "path": "2024/custom.md",
            "created": True,
        },
    }
    assert second.json()["data"]["created"] is False
    assert fake.text("alice", "notes", "2024/custom.md") == "# Two"
    assert me.json()["data"] == {
        "user": {"id": str(USER_ID), "github_id": "octocat", "email": "octocat@github.com"},
        "github_connected": True,
    }


@pytest.mark.anyio
async def test_upload_conflict_surfaces_as_409(upload_env):
    fake, registry, bindings = upload_env
    registry.store(USER_ID, VALID_TOKEN)
    bindings.store(USER_ID, parse_repository_url("https://github.com/alice/notes"))
    fake.fail("PUT", "a.md", 409)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/github/upload",
            json={"content": "x", "path": "a.md"},
            headers=_auth_headers(),
        )

    assert response.status_code == 409
    assert response.json() == {"message": "github_write_conflict", "data": None}


@pytest.mark.anyio
async def test_logout_forgets_github_token():
    from app.dependencies import get_token_registry

    shared_registry = get_token_registry()
    shared_registry.store(USER_ID, VALID_TOKEN)

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=app), base_url="http://testserver"
    ) as client:
        response = await client.post("/api/auth/logout", headers=_auth_headers())

    assert response.status_code == 200
    assert response.json() == {"message": "logout_success", "data": None}
    assert shared_registry.get(USER_ID) is None
