"""Tests for the read-modify-write cycle in confluence_client."""

import pytest

from confluence_client import ConfluenceClient
from errors import RemoteFetchError, RemoteWriteError


class TestFetchSnapshot:

    def test_returns_current_state(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>Hello</p>", version=7, title="Changelog")
        snapshot = confluence_client.fetch_snapshot("42")
        assert snapshot.id == "42"
        assert snapshot.title == "Changelog"
        assert snapshot.body == "<p>Hello</p>"
        assert snapshot.version == 7

    def test_missing_page(self, confluence_client):
        with pytest.raises(RemoteFetchError) as exc_info:
            confluence_client.fetch_snapshot("404")
        assert exc_info.value.status_code == 404

    def test_transport_error(self, confluence_client, confluence_session, connection_error):
        confluence_session.fail_with = connection_error
        with pytest.raises(RemoteFetchError):
            confluence_client.fetch_snapshot("42")

    def test_unconfigured_client(self, confluence_session):
        client = ConfluenceClient(base_url="", email="", api_token="", session=confluence_session)
        assert client.configured is False
        with pytest.raises(RemoteFetchError, match="not configured"):
            client.fetch_snapshot("42")

    def test_request_shape(self, confluence_session):
        confluence_session.add_page("42", "")
        calls = []
        original_get = confluence_session.get

        def recording_get(url, params=None, timeout=None):
            calls.append((url, params, timeout))
            return original_get(url, params=params, timeout=timeout)

        confluence_session.get = recording_get
        client = ConfluenceClient("https://example.atlassian.net/", "bot@example.com", "tok",
                                  timeout=3, session=confluence_session)
        client.fetch_snapshot("42")

        assert calls == [(
            "https://example.atlassian.net/wiki/rest/api/content/42",
            {"expand": "body.storage,version"},
            3,
        )]
        assert confluence_session.auth == ("bot@example.com", "tok")


class TestMutations:

    def test_append_content(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>old</p>", version=3)
        confluence_client.append_content("42", "<p>new</p>")

        snapshot = confluence_client.fetch_snapshot("42")
        assert snapshot.body == "<p>old</p>\n<p>new</p>"
        assert snapshot.version == 4

    def test_update_payload(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>old</p>", version=3, title="Changelog")
        confluence_client.append_content("42", "<p>new</p>")

        page_id, payload = confluence_session.puts[-1]
        assert page_id == "42"
        assert payload == {
            "version": {"number": 4},
            "title": "Changelog",
            "type": "page",
            "body": {"storage": {"value": "<p>old</p>\n<p>new</p>", "representation": "storage"}},
        }

    def test_prepend_content(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>old</p>", version=1)
        confluence_client.prepend_content("42", "<p>new</p>")

        snapshot = confluence_client.fetch_snapshot("42")
        assert snapshot.body == "<p>new</p>\n<p>old</p>"
        assert snapshot.version == 2

    def test_each_mutation_reads_fresh_version(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "a", version=1)
        confluence_client.append_content("42", "b")
        # Another writer moves the page on between our calls.
        confluence_session.pages["42"]["version"] = 10
        confluence_client.append_content("42", "c")

        assert confluence_session.pages["42"]["version"] == 11
        assert confluence_session.pages["42"]["body"] == "a\nb\nc"

    def test_replace_marked_section_appends_when_missing(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>intro</p>")
        confluence_client.replace_marked_section("42", "STATUS", "<p>green</p>")

        assert confluence_session.pages["42"]["body"] == (
            "<p>intro</p>\n<!-- STATUS_START -->\n<p>green</p>\n<!-- STATUS_END -->"
        )

    def test_replace_marked_section_is_structurally_idempotent(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>intro</p>")
        confluence_client.replace_marked_section("42", "STATUS", "<p>green</p>")
        confluence_client.replace_marked_section("42", "STATUS", "<p>red</p>")

        body = confluence_session.pages["42"]["body"]
        assert body.count("<!-- STATUS_START -->") == 1
        assert body.count("<!-- STATUS_END -->") == 1
        assert "<p>green</p>" not in body
        assert "<!-- STATUS_START -->\n<p>red</p>\n<!-- STATUS_END -->" in body
        assert confluence_session.pages["42"]["version"] == 3

    def test_replace_marked_section_keeps_surrounding_text(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "before<!-- S_START -->old<!-- S_END -->after")
        confluence_client.replace_marked_section("42", "S", "new")
        assert confluence_session.pages["42"]["body"] == "before<!-- S_START -->\nnew\n<!-- S_END -->after"

    def test_replace_marked_section_other_name_untouched(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<!-- A_START -->\nx\n<!-- A_END -->")
        confluence_client.replace_marked_section("42", "B", "y")
        body = confluence_session.pages["42"]["body"]
        assert body.startswith("<!-- A_START -->\nx\n<!-- A_END -->\n")
        assert body.endswith("<!-- B_START -->\ny\n<!-- B_END -->")


class TestVersionConflict:

    def test_concurrent_writer_causes_write_error(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>old</p>", version=3)

        def concurrent_edit():
            page = confluence_session.pages["42"]
            page["body"] = "<p>theirs</p>"
            page["version"] = 4

        confluence_session.before_put = concurrent_edit

        with pytest.raises(RemoteWriteError) as exc_info:
            confluence_client.append_content("42", "<p>new</p>")
        assert exc_info.value.status_code == 409

        confluence_session.before_put = None
        snapshot = confluence_client.fetch_snapshot("42")
        assert snapshot.body == "<p>theirs</p>"
        assert snapshot.version == 4

    def test_rejected_write_leaves_page_unchanged(self, confluence_client, confluence_session):
        confluence_session.add_page("42", "<p>old</p>", version=3)
        confluence_session.before_put = lambda: confluence_session.pages["42"].update(version=5)

        with pytest.raises(RemoteWriteError):
            confluence_client.prepend_content("42", "<p>new</p>")
        assert confluence_session.pages["42"]["body"] == "<p>old</p>"

    def test_missing_page_is_fetch_error_not_write(self, confluence_client):
        with pytest.raises(RemoteFetchError):
            confluence_client.append_content("404", "<p>new</p>")
