# github_client.py

import logging
from typing import List, Optional

import requests

from errors import GitHubError

logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"


class GitHubClient:
    def __init__(self, token: str, api_url: str = DEFAULT_API_URL, timeout: float = 10,
                 session: Optional[requests.Session] = None):
        self.token = token
        self.api_url = api_url.rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/vnd.github.v3+json",
        })

    @property
    def configured(self) -> bool:
        return bool(self.token)

    def _request(self, method: str, path: str, **kwargs) -> requests.Response:
        try:
            return self.session.request(method, f"{self.api_url}{path}", timeout=self.timeout, **kwargs)
        except requests.RequestException as e:
            logger.error(f"GitHub request {method} {path} failed: {e}")
            raise GitHubError(f"GitHub request failed: {e}") from e

    def get_username(self) -> str:
        response = self._request("GET", "/user")
        if not response.ok:
            raise GitHubError("Invalid GitHub token", response.status_code)
        return response.json()["login"]

    def list_repositories(self) -> List[dict]:
        response = self._request("GET", "/user/repos", params={
            "per_page": 100,
            "sort": "updated",
            "affiliation": "owner,collaborator,organization_member",
        })
        if not response.ok:
            logger.error(f"Error fetching repos. Code: {response.status_code}, Resp: {response.text}")
            raise GitHubError(f"Failed to list repositories (HTTP {response.status_code})", response.status_code)

        return [
            {
                "fullName": repo["full_name"],
                "name": repo["name"],
                "owner": repo["owner"]["login"],
                "private": repo["private"],
                "url": repo["html_url"],
            }
            for repo in response.json()
        ]

    def create_push_webhook(self, repository: str, webhook_url: str, secret: str) -> bool:
        """
        Subscribe webhook_url to push events of a repository.

        Returns False when GitHub reports the hook already exists (HTTP 422).
        """
        response = self._request("POST", f"/repos/{repository}/hooks", json={
            "name": "web",
            "active": True,
            "events": ["push"],
            "config": {
                "url": webhook_url,
                "content_type": "json",
                "secret": secret,
                "insecure_ssl": "0",
            },
        })

        if response.status_code == 422:
            logger.info(f"Webhook already exists for {repository}")
            return False
        if not response.ok:
            try:
                message = response.json().get("message", response.text)
            except ValueError:
                message = response.text
            logger.error(f"Error creating webhook for {repository}: {message}")
            raise GitHubError(f"Failed to create webhook: {message}", response.status_code)

        logger.info(f"Webhook created for {repository}")
        return True
