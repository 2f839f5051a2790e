# confluence_client.py

import logging
from typing import Optional

import requests

from errors import RemoteFetchError, RemoteWriteError
from models.page_snapshot import PageSnapshot

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 10


class ConfluenceClient:
    """
    Read-modify-write client for Confluence pages.

    Every mutation fetches a fresh snapshot and submits the whole body with
    the version number incremented by one. A concurrent writer that advanced
    the version first makes the update fail with RemoteWriteError; nothing is
    retried.
    """

    def __init__(self, base_url: str, email: str, api_token: str,
                 timeout: float = DEFAULT_TIMEOUT, session: Optional[requests.Session] = None):
        self.base_url = (base_url or "").rstrip("/")
        self.email = email
        self.api_token = api_token
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.auth = (email, api_token)
        self.session.headers.update({
            "Content-Type": "application/json",
            "Accept": "application/json",
        })

    @property
    def configured(self) -> bool:
        return bool(self.base_url and self.email and self.api_token)

    @property
    def api_url(self) -> str:
        return f"{self.base_url}/wiki/rest/api"

    def fetch_snapshot(self, page_id: str) -> PageSnapshot:
        if not self.configured:
            raise RemoteFetchError("Confluence not configured. Please set up Confluence credentials.", page_id)

        logger.info(f"Fetching current page content for page {page_id}...")
        try:
            response = self.session.get(
                f"{self.api_url}/content/{page_id}",
                params={"expand": "body.storage,version"},
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error fetching page {page_id}: {e}")
            raise RemoteFetchError(f"Failed to fetch page {page_id}: {e}", page_id) from e

        if response.status_code == 404:
            raise RemoteFetchError(f"Page {page_id} not found", page_id, response.status_code)
        if not response.ok:
            logger.error(f"Error fetching page {page_id}. Code: {response.status_code}, Resp: {response.text}")
            raise RemoteFetchError(
                f"Failed to fetch page {page_id} (HTTP {response.status_code})", page_id, response.status_code
            )

        try:
            return PageSnapshot.from_api(response.json())
        except (ValueError, KeyError, TypeError) as e:
            raise RemoteFetchError(f"Unexpected page payload for {page_id}: {e}", page_id) from e

    def update_page(self, snapshot: PageSnapshot, new_body: str) -> PageSnapshot:
        new_version = snapshot.version + 1
        logger.info(f"Updating page {snapshot.id} (version {snapshot.version} -> {new_version})...")
        payload = {
            "version": {"number": new_version},
            "title": snapshot.title,
            "type": "page",
            "body": {
                "storage": {
                    "value": new_body,
                    "representation": "storage",
                }
            },
        }
        try:
            response = self.session.put(
                f"{self.api_url}/content/{snapshot.id}",
                json=payload,
                timeout=self.timeout,
            )
        except requests.RequestException as e:
            logger.error(f"Error updating page {snapshot.id}: {e}")
            raise RemoteWriteError(f"Failed to update page {snapshot.id}: {e}", snapshot.id) from e

        if response.status_code == 409:
            raise RemoteWriteError(
                f"Version conflict updating page {snapshot.id}: version {new_version} was rejected",
                snapshot.id, response.status_code,
            )
        if not response.ok:
            logger.error(f"Error updating page {snapshot.id}. Code: {response.status_code}, Resp: {response.text}")
            raise RemoteWriteError(
                f"Failed to update page {snapshot.id} (HTTP {response.status_code})", snapshot.id, response.status_code
            )

        return PageSnapshot(id=snapshot.id, title=snapshot.title, body=new_body, version=new_version)

    def append_content(self, page_id: str, fragment: str) -> PageSnapshot:
        snapshot = self.fetch_snapshot(page_id)
        return self.update_page(snapshot, snapshot.body + "\n" + fragment)

    def prepend_content(self, page_id: str, fragment: str) -> PageSnapshot:
        snapshot = self.fetch_snapshot(page_id)
        return self.update_page(snapshot, fragment + "\n" + snapshot.body)

    def replace_marked_section(self, page_id: str, section_name: str, content: str) -> PageSnapshot:
        """
        Replace the text between <!-- NAME_START --> and <!-- NAME_END -->.

        When the marker pair is missing, a new delimited block is appended.
        """
        snapshot = self.fetch_snapshot(page_id)
        start_marker = f"<!-- {section_name}_START -->"
        end_marker = f"<!-- {section_name}_END -->"
        section = f"{start_marker}\n{content}\n{end_marker}"

        start_idx = snapshot.body.find(start_marker)
        end_idx = snapshot.body.find(end_marker, start_idx + len(start_marker)) if start_idx != -1 else -1

        if end_idx != -1:
            updated_body = snapshot.body[:start_idx] + section + snapshot.body[end_idx + len(end_marker):]
        else:
            updated_body = snapshot.body + "\n" + section

        return self.update_page(snapshot, updated_body)
