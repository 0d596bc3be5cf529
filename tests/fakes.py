"""In-memory fakes for the management API and the retry clock."""

import json
from urllib.parse import unquote

import httpx

from burrow.client import BrokerAdminClient


class FakeBroker:
    """In-memory stand-in for the management API user endpoints.

    Records every request in ``requests`` as (method, name, json body).
    ``fail_puts`` makes the next N PUTs answer ``fail_status`` (or raise a
    connection error when ``fail_status`` is None). ``statuses`` forces the
    status of the next call per method.
    """

    def __init__(self, tags_as_list: bool = False):
        self.users: dict[str, dict] = {}
        self.requests: list[tuple[str, str, dict | None]] = []
        self.tags_as_list = tags_as_list
        self.fail_puts = 0
        self.fail_status: int | None = 503
        self.statuses: dict[str, int] = {}

    def handle(self, request: httpx.Request) -> httpx.Response:
        prefix = "/api/users/"
        assert request.url.raw_path.decode().startswith(prefix)
        name = unquote(request.url.raw_path.decode()[len(prefix):])
        body = json.loads(request.content) if request.content else None
        self.requests.append((request.method, name, body))

        if request.method == "PUT" and self.fail_puts > 0:
            self.fail_puts -= 1
            if self.fail_status is None:
                raise httpx.ConnectError("connection refused", request=request)
            return httpx.Response(self.fail_status)

        forced = self.statuses.pop(request.method, None)
        if forced is not None:
            return httpx.Response(forced)

        if request.method == "PUT":
            existing = self.users.get(name)
            record = {"password": body.get("password", ""), "tags": body.get("tags", "")}
            if existing is not None and "password" not in body:
                record["password"] = existing["password"]
            self.users[name] = record
            return httpx.Response(204 if existing else 201)

        if request.method == "GET":
            if name not in self.users:
                return httpx.Response(404, json={"error": "Object Not Found", "reason": "Not Found"})
            tags = self.users[name]["tags"]
            if self.tags_as_list:
                tags = [tag for tag in tags.split(",") if tag]
            return httpx.Response(
                200,
                json={
                    "name": name,
                    "password_hash": "aGFzaA==",
                    "hashing_algorithm": "rabbit_password_hashing_sha256",
                    "tags": tags,
                },
            )

        if request.method == "DELETE":
            if self.users.pop(name, None) is None:
                return httpx.Response(404, json={"error": "Object Not Found", "reason": "Not Found"})
            return httpx.Response(204)

        return httpx.Response(405)

    def puts(self) -> list[dict]:
        return [body for method, _, body in self.requests if method == "PUT"]


class FakeClock:
    """Monotonic clock whose sleep() just advances time."""

    def __init__(self):
        self.now = 0.0
        self.sleeps: list[float] = []

    def time(self) -> float:
        return self.now

    def sleep(self, seconds: float) -> None:
        self.sleeps.append(seconds)
        self.now += seconds


def make_client(broker: FakeBroker) -> BrokerAdminClient:
    return BrokerAdminClient(
        "http://broker.test:15672",
        "admin",
        "admin-secret",
        transport=httpx.MockTransport(lambda request: broker.handle(request)),
    )
