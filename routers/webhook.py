import logging
import traceback
from fastapi import APIRouter, BackgroundTasks, Depends, Request, Header, HTTPException, status

from confluence_client import ConfluenceClient
from dependencies import get_confluence_client, get_mapping_store, get_webhook_secret
from errors import AuthenticationError
from mapping_store import MappingStore
from push_relay import dispatch_push_event
from utils import decode_payload, require_valid_signature

router = APIRouter()
logger = logging.getLogger(__name__)


def process_push_delivery(body_bytes: bytes, content_type: str, store: MappingStore, client: ConfluenceClient):
    """
    Runs after the webhook response was sent. Nothing here reaches the caller.
    """
    try:
        payload = decode_payload(body_bytes, content_type)
    except (ValueError, UnicodeDecodeError) as e:
        error_trace = traceback.format_exc()
        logger.error(f"Could not decode JSON payload: {str(e)}\n{error_trace}")
        return
    dispatch_push_event(payload, store, client)


@router.post("/webhook/github", summary="GitHub Webhook Endpoint")
async def handle_webhook(
        request: Request,
        background_tasks: BackgroundTasks,
        x_hub_signature_256: str = Header(None),
        x_github_event: str = Header(None),
        secret: str = Depends(get_webhook_secret),
        store: MappingStore = Depends(get_mapping_store),
        client: ConfluenceClient = Depends(get_confluence_client),
):
    body_bytes = await request.body()

    # 1. Verify signature over the raw body.
    try:
        require_valid_signature(body_bytes, x_hub_signature_256, secret)
    except AuthenticationError as e:
        logger.warning(f"Rejected webhook delivery: {e}")
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e)
        )

    logger.info(f"Received GitHub event: {x_github_event}")

    # 2. Dispatch by event kind. The response is sent before any processing.
    if x_github_event == "push":
        content_type = request.headers.get("Content-Type", "")
        background_tasks.add_task(process_push_delivery, body_bytes, content_type, store, client)
    elif x_github_event == "ping":
        logger.info("Received ping from GitHub.")
    else:
        logger.info(f"Ignoring event type: {x_github_event}")

    return {"message": "Webhook received"}
