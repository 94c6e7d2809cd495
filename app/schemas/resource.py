from pydantic import BaseModel
from typing import Literal

ResourceType = Literal["Article", "Guide", "Technique", "Exercise"]

class ResourceSummary(BaseModel):
    slug: str
    title: str
    description: str
    type: ResourceType
    category: str
    link: str

class Resource(ResourceSummary):
    content: str
