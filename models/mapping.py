from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Optional

WILDCARD_BRANCH = "*"


def page_id_as_text(value):
    # Confluence page ids are numeric; YAML and JSON clients often send them unquoted.
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class Mapping(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    repository: str
    branch: str
    confluence_page_id: str = Field(alias="confluencePageId")

    @field_validator("confluence_page_id", mode="before")
    @classmethod
    def coerce_page_id(cls, value):
        return page_id_as_text(value)

    def matches(self, repository: str, branch: str) -> bool:
        return self.repository == repository and self.branch in (branch, WILDCARD_BRANCH)


class ConnectionRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    repository: Optional[str] = None
    branch: Optional[str] = None
    confluence_page_id: Optional[str] = Field(default=None, alias="confluencePageId")

    @field_validator("confluence_page_id", mode="before")
    @classmethod
    def coerce_page_id(cls, value):
        return page_id_as_text(value)


class ConnectionDeleteRequest(BaseModel):
    repository: Optional[str] = None
    branch: Optional[str] = None
