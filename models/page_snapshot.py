from pydantic import BaseModel


class PageSnapshot(BaseModel):
    id: str
    title: str
    body: str
    version: int

    @classmethod
    def from_api(cls, data: dict) -> "PageSnapshot":
        return cls(
            id=str(data["id"]),
            title=data["title"],
            body=data["body"]["storage"]["value"],
            version=int(data["version"]["number"]),
        )
