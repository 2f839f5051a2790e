# push_relay.py

import enum
import logging
import traceback
from datetime import datetime
from typing import Callable

from confluence_client import ConfluenceClient
from content_formatter import build_update_content
from mapping_store import MappingStore
from models.github_webhook import PushEvent
from utils import branch_from_ref

logger = logging.getLogger(__name__)


class RelayOutcome(enum.Enum):
    UPDATED = "updated"
    NO_COMMITS = "no_commits"
    NO_MAPPING = "no_mapping"
    FAILED = "failed"


def handle_push_event(payload: dict, store: MappingStore, client: ConfluenceClient,
                      clock: Callable[[], datetime] = datetime.now) -> RelayOutcome:
    """
    Resolve the target page for a push and append a summary of its commits.

    Pydantic validation errors and Confluence errors propagate to the caller.
    """
    event = PushEvent(**payload)
    repo_full_name = event.repository.full_name
    push_branch = branch_from_ref(event.ref)

    if not event.commits:
        logger.info(f"No commits in push event for {repo_full_name} on branch {push_branch}")
        return RelayOutcome.NO_COMMITS

    pusher = event.pusher.name if event.pusher else "unknown"
    logger.info(f"Processing push to {repo_full_name} on branch {push_branch}: "
                f"{len(event.commits)} commit(s) by {pusher}")

    mapping = store.resolve(repo_full_name, push_branch)
    if mapping is None:
        logger.info(f"No Confluence mapping found for {repo_full_name}:{push_branch}")
        return RelayOutcome.NO_MAPPING

    logger.info(f"Found mapping to Confluence page ID: {mapping.confluence_page_id}")
    content = build_update_content(event, push_branch, clock())
    client.append_content(mapping.confluence_page_id, content)
    logger.info(f"Successfully updated Confluence page {mapping.confluence_page_id}")
    return RelayOutcome.UPDATED


def dispatch_push_event(payload: dict, store: MappingStore, client: ConfluenceClient,
                        clock: Callable[[], datetime] = datetime.now) -> RelayOutcome:
    """
    Run handle_push_event after the webhook was acknowledged.

    Failures are terminal for the event and only visible in the logs.
    """
    try:
        return handle_push_event(payload, store, client, clock)
    except Exception as e:
        error_trace = traceback.format_exc()
        logger.error(f"Failed to relay push event to Confluence: {str(e)}\n{error_trace}")
        return RelayOutcome.FAILED
