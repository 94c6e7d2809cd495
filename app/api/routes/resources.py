from typing import Optional
from fastapi import APIRouter, HTTPException, Query
from app.schemas.resource import Resource, ResourceSummary
from app.services import resources as catalogue

router = APIRouter(prefix="/api/resources", tags=["resources"])

@router.get("", response_model=list[ResourceSummary])
async def list_resources(
    category: Optional[str] = Query(None),
    q: Optional[str] = Query(None, max_length=200),
):
    return catalogue.list_resources(category=category, query=q)

@router.get("/categories", response_model=list[str])
async def list_categories():
    return catalogue.categories()

@router.get("/{slug}", response_model=Resource)
async def detail(slug: str):
    resource = catalogue.get_resource(slug)
    if resource is None:
        raise HTTPException(status_code=404, detail="Resource not found")
    return resource
