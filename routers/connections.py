# connections.py is a FastAPI router that manages repository to Confluence page mappings.

from fastapi import APIRouter, Depends, HTTPException, Request, status
import logging

from dependencies import (
    get_github_client,
    get_management_api_key,
    get_mapping_store,
    get_public_webhook_url,
    get_webhook_secret,
)
from errors import ConflictError, GitHubError, NotFoundError, ValidationError
from github_client import GitHubClient
from mapping_store import MappingStore
from models.mapping import ConnectionDeleteRequest, ConnectionRequest

router = APIRouter(prefix="/api/connections", dependencies=[Depends(get_management_api_key)])
logger = logging.getLogger(__name__)


@router.get("", summary="List Connections")
def list_connections(store: MappingStore = Depends(get_mapping_store)):
    return {
        "success": True,
        "connections": [m.model_dump(by_alias=True) for m in store.list()],
    }


@router.post("", summary="Add Connection")
def add_connection(
        connection: ConnectionRequest,
        request: Request,
        store: MappingStore = Depends(get_mapping_store),
        github: GitHubClient = Depends(get_github_client),
        secret: str = Depends(get_webhook_secret),
        webhook_url: str = Depends(get_public_webhook_url),
):
    repository = connection.repository
    branch = connection.branch
    page_id = connection.confluence_page_id

    if not repository or not branch or not page_id:
        message = "Missing required fields: repository, branch, confluencePageId"
        logger.warning(message)
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=message)

    if not github.configured:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="GitHub not connected")

    if store.contains(repository, branch):
        message = f"Connection already exists for repository '{repository}' and branch '{branch}'"
        logger.warning(message)
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=message)

    # Register the push webhook before storing the mapping.
    target_url = webhook_url or str(request.url_for("handle_webhook"))
    try:
        github.create_push_webhook(repository, target_url, secret)
    except GitHubError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    try:
        store.add(repository, branch, page_id)
    except ValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except ConflictError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))

    return {"success": True, "message": "Connection added and webhook created successfully"}


@router.delete("", summary="Delete Connection")
def delete_connection(connection: ConnectionDeleteRequest, store: MappingStore = Depends(get_mapping_store)):
    try:
        store.remove(connection.repository, connection.branch)
    except ValidationError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e))
    except NotFoundError as e:
        logger.warning(str(e))
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Connection not found")

    return {"success": True, "message": "Connection deleted successfully"}
