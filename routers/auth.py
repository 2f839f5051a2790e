from fastapi import APIRouter, Depends, HTTPException, status
import logging

from confluence_client import ConfluenceClient
from dependencies import get_confluence_client, get_github_client, get_management_api_key
from errors import GitHubError
from github_client import GitHubClient

router = APIRouter(prefix="/api", dependencies=[Depends(get_management_api_key)])
logger = logging.getLogger(__name__)


@router.get("/auth/status", summary="Connection Status")
def auth_status(
        github: GitHubClient = Depends(get_github_client),
        confluence: ConfluenceClient = Depends(get_confluence_client),
):
    username = None
    if github.configured:
        try:
            username = github.get_username()
        except GitHubError as e:
            logger.warning(f"GitHub token check failed: {e}")

    return {
        "githubConnected": username is not None,
        "githubUsername": username,
        "confluenceConnected": confluence.configured,
    }


@router.get("/github/repos", summary="List GitHub Repositories")
def list_repositories(github: GitHubClient = Depends(get_github_client)):
    if not github.configured:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="GitHub not connected")

    try:
        repos = github.list_repositories()
    except GitHubError as e:
        raise HTTPException(status_code=status.HTTP_502_BAD_GATEWAY, detail=str(e))

    return {"success": True, "repos": repos}
