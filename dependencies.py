# dependencies.py

from functools import lru_cache
from typing import Optional

from fastapi import Header, HTTPException, status
import logging

from config import (
    CONFLUENCE_SETTINGS,
    GITHUB_SETTINGS,
    MANAGEMENT_API_KEY,
    MAPPINGS_PATH,
    REQUEST_TIMEOUT,
    WEBHOOK_SECRET,
)
from confluence_client import ConfluenceClient
from github_client import GitHubClient
from mapping_store import MappingStore

logger = logging.getLogger(__name__)


def get_management_api_key(api_key: Optional[str] = Header(None, alias="X-API-Key")):
    if not MANAGEMENT_API_KEY:
        return api_key
    if api_key != MANAGEMENT_API_KEY:
        logger.warning("Invalid API Key for connection management.")
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid API Key")
    return api_key


def get_webhook_secret() -> str:
    return WEBHOOK_SECRET


@lru_cache()
def get_mapping_store() -> MappingStore:
    return MappingStore.from_file(MAPPINGS_PATH)


@lru_cache()
def get_confluence_client() -> ConfluenceClient:
    return ConfluenceClient(
        base_url=CONFLUENCE_SETTINGS['base_url'],
        email=CONFLUENCE_SETTINGS['email'],
        api_token=CONFLUENCE_SETTINGS['api_token'],
        timeout=REQUEST_TIMEOUT,
    )


@lru_cache()
def get_github_client() -> GitHubClient:
    return GitHubClient(
        token=GITHUB_SETTINGS['token'],
        api_url=GITHUB_SETTINGS['api_url'],
        timeout=REQUEST_TIMEOUT,
    )


def get_public_webhook_url() -> str:
    return GITHUB_SETTINGS['webhook_url']
