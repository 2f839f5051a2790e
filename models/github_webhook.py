from pydantic import BaseModel
from typing import List, Optional


class Repository(BaseModel):
    full_name: str
    html_url: str = ""


class CommitAuthor(BaseModel):
    name: str = ""


class Commit(BaseModel):
    id: str
    message: str = ""
    author: CommitAuthor = CommitAuthor()
    url: str = ""

    @property
    def short_sha(self) -> str:
        return self.id[:7]

    @property
    def title(self) -> str:
        return self.message.split("\n")[0]


class Pusher(BaseModel):
    name: str = ""


class PushEvent(BaseModel):
    ref: str
    repository: Repository
    commits: List[Commit] = []
    pusher: Optional[Pusher] = None
