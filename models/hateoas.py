from typing import List

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer


class HATEOASLink(BaseModel):
    relation: str     # "self", "user", "next", ...
    href: str         # absolute URL

    model_config = ConfigDict(frozen=True)


class LinkedModel(BaseModel):
    """Base for every response that carries hyperlinks.

    Links are passed in the constructor; instances are frozen afterwards.
    """
    links: List[HATEOASLink] = Field(
        default_factory=list,
        description="HATEOAS links, in display order"
    )

    model_config = ConfigDict(frozen=True)

    @field_validator("links")
    @classmethod
    def unique_relations(cls, links: List[HATEOASLink]) -> List[HATEOASLink]:
        seen = set()
        for link in links:
            if link.relation in seen:
                raise ValueError(f"Duplicate link relation: {link.relation}")
            seen.add(link.relation)
        return links

    @model_serializer(mode="wrap")
    def omit_empty(self, handler):
        # links stay even when empty; other null, empty string or empty list fields are dropped
        data = handler(self)
        return {
            key: value
            for key, value in data.items()
            if key == "links" or value not in (None, "", [])
        }

    def get_link(self, relation: str) -> HATEOASLink | None:
        return next((link for link in self.links if link.relation == relation), None)
