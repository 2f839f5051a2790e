"""Shared fixtures. The environment is pinned before the app modules are imported."""

import os
import tempfile

_TMP_DIR = tempfile.mkdtemp(prefix="relay-tests-")
os.environ["CONFIG_PATH"] = os.path.join(os.path.dirname(__file__), "fixtures", "config.yaml")
os.environ["LOG_DB_PATH"] = os.path.join(_TMP_DIR, "logs.db")
os.environ["MAPPINGS_PATH"] = os.path.join(_TMP_DIR, "mappings.yaml")
for _name in ("GITHUB_WEBHOOK_SECRET", "GITHUB_TOKEN", "CONFLUENCE_BASE_URL",
              "CONFLUENCE_EMAIL", "CONFLUENCE_API_TOKEN", "PUBLIC_WEBHOOK_URL"):
    os.environ.pop(_name, None)

from datetime import datetime  # noqa: E402

import pytest  # noqa: E402
import requests  # noqa: E402

from confluence_client import ConfluenceClient  # noqa: E402
from mapping_store import MappingStore  # noqa: E402


class FakeResponse:
    def __init__(self, status_code, payload=None):
        self.status_code = status_code
        self._payload = payload

    @property
    def ok(self):
        return 200 <= self.status_code < 400

    @property
    def text(self):
        return str(self._payload)

    def json(self):
        if self._payload is None:
            raise ValueError("No JSON body")
        return self._payload


class FakeConfluenceSession:
    """In-memory stand-in for the Confluence content endpoints."""

    def __init__(self):
        self.headers = {}
        self.auth = None
        self.pages = {}
        self.puts = []
        self.before_put = None
        self.fail_with = None

    def add_page(self, page_id, body, version=1, title="Release Notes"):
        self.pages[page_id] = {"title": title, "body": body, "version": version}

    def get(self, url, params=None, timeout=None):
        if self.fail_with is not None:
            raise self.fail_with
        page_id = url.rsplit("/", 1)[-1]
        page = self.pages.get(page_id)
        if page is None:
            return FakeResponse(404, {"message": "No content found"})
        return FakeResponse(200, {
            "id": page_id,
            "title": page["title"],
            "body": {"storage": {"value": page["body"], "representation": "storage"}},
            "version": {"number": page["version"]},
        })

    def put(self, url, json=None, timeout=None):
        if self.before_put is not None:
            self.before_put()
        page_id = url.rsplit("/", 1)[-1]
        self.puts.append((page_id, json))
        page = self.pages.get(page_id)
        if page is None:
            return FakeResponse(404, {"message": "No content found"})
        if json["version"]["number"] != page["version"] + 1:
            return FakeResponse(409, {"message": "Version must be incremented on update"})
        page["body"] = json["body"]["storage"]["value"]
        page["title"] = json["title"]
        page["version"] = json["version"]["number"]
        return FakeResponse(200, {"id": page_id, "version": {"number": page["version"]}})


@pytest.fixture
def confluence_session():
    return FakeConfluenceSession()


@pytest.fixture
def confluence_client(confluence_session):
    return ConfluenceClient(
        base_url="https://example.atlassian.net",
        email="bot@example.com",
        api_token="confluence-token",
        session=confluence_session,
    )


@pytest.fixture
def store():
    return MappingStore()


@pytest.fixture
def fixed_clock():
    return lambda: datetime(2026, 10, 18, 15, 5)


@pytest.fixture
def push_payload():
    return {
        "ref": "refs/heads/main",
        "repository": {
            "full_name": "acme/widgets",
            "html_url": "https://github.com/acme/widgets",
        },
        "commits": [
            {
                "id": "abcdef1234567890",
                "message": "Fix bug\nmore text",
                "author": {"name": "Alice"},
                "url": "https://github.com/acme/widgets/commit/abcdef1234567890",
            }
        ],
        "pusher": {"name": "alice"},
    }


@pytest.fixture
def connection_error():
    return requests.ConnectionError("connection refused")
