"""In-memory stand-in for the GitHub contents API behind ``httpx.MockTransport``."""

from __future__ import annotations

import asyncio
import base64
import hashlib
import json
from dataclasses import dataclass, field

import httpx

VALID_TOKEN = "gho_valid-token"


@dataclass
class _Gate:
    count: int
    arrived: int = 0
    event: asyncio.Event = field(default_factory=asyncio.Event)


class FakeGitHub:
    """Files live in ``files[(owner, repo, path)] = {"content": bytes, "sha": str}``."""

    def __init__(self, repos: tuple[tuple[str, str], ...] = (("alice", "notes"),)) -> None:
        self.repos = set(repos)
        self.files: dict[tuple[str, str, str], dict] = {}
        self.requests: list[tuple[str, str]] = []
        self.writes: list[tuple[str, dict]] = []
        self.failures: dict[tuple[str, str], tuple[int, dict[str, str]]] = {}
        self._gates: dict[str, _Gate] = {}
        self._version = 0

    def transport(self) -> httpx.MockTransport:
        return httpx.MockTransport(self.handler)

    def seed(self, owner: str, repo: str, path: str, content: bytes = b"") -> str:
        sha = self._next_sha(content)
        self.files[(owner, repo, path)] = {"content": content, "sha": sha}
        return sha

    def fail(self, method: str, path: str, status: int, headers: dict[str, str] | None = None) -> None:
        self.failures[(method, path)] = (status, headers or {})

    def hold_probes(self, path: str, count: int) -> None:
        """Make GETs for ``path`` wait until ``count`` of them have arrived."""
        self._gates[path] = _Gate(count=count)

    def text(self, owner: str, repo: str, path: str) -> str:
        return self.files[(owner, repo, path)]["content"].decode("utf-8")

    def _next_sha(self, content: bytes) -> str:
        self._version += 1
        return hashlib.sha1(content + str(self._version).encode()).hexdigest()

    async def handler(self, request: httpx.Request) -> httpx.Response:
        parts = request.url.path.split("/", 5)
        # ["", "repos", owner, repo, "contents", path]
        owner, repo = parts[2], parts[3]
        path = parts[5] if len(parts) > 5 else ""
        self.requests.append((request.method, path))

        if request.headers.get("authorization") != f"Bearer {VALID_TOKEN}":
            return httpx.Response(401, json={"message": "Bad credentials"})

        if (request.method, path) in self.failures:
            status, headers = self.failures[(request.method, path)]
            return httpx.Response(status, json={"message": "forced failure"}, headers=headers)

        if (owner, repo) not in self.repos:
            return httpx.Response(404, json={"message": "Not Found"})

        if request.method == "GET":
            gate = self._gates.get(path)
            response = self._get(owner, repo, path)
            if gate is not None:
                gate.arrived += 1
                if gate.arrived >= gate.count:
                    gate.event.set()
                await gate.event.wait()
            return response
        if request.method == "PUT":
            return self._put(owner, repo, path, json.loads(request.content))
        return httpx.Response(405)

    def _get(self, owner: str, repo: str, path: str) -> httpx.Response:
        existing = self.files.get((owner, repo, path))
        if existing is not None:
            return httpx.Response(
                200, json={"type": "file", "path": path, "sha": existing["sha"]}
            )
        children = [
            {"type": "file", "path": file_path, "sha": data["sha"]}
            for (o, r, file_path), data in self.files.items()
            if o == owner and r == repo and file_path.startswith(f"{path}/")
        ]
        if children:
            return httpx.Response(200, json=children)
        return httpx.Response(404, json={"message": "Not Found"})

    def _put(self, owner: str, repo: str, path: str, body: dict) -> httpx.Response:
        self.writes.append((path, body))
        existing = self.files.get((owner, repo, path))
        supplied_sha = body.get("sha")
        if existing is not None and supplied_sha is None:
            return httpx.Response(422, json={"message": '"sha" wasn\'t supplied.'})
        if existing is not None and supplied_sha != existing["sha"]:
            return httpx.Response(409, json={"message": f"{path} does not match"})
        if existing is None and supplied_sha is not None:
            return httpx.Response(422, json={"message": "sha for a missing file"})

        content = base64.b64decode(body["content"])
        sha = self._next_sha(content)
        self.files[(owner, repo, path)] = {"content": content, "sha": sha}
        return httpx.Response(
            200 if existing else 201,
            json={"content": {"path": path, "sha": sha}, "commit": {"message": body["message"]}},
        )
