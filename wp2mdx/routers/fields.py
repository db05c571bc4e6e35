from typing import Any, Dict

from fastapi import APIRouter

from wp2mdx.models.request import FieldMapRequest
from wp2mdx.services.field_mapper import get_field_mapping_docs, map_themerain_fields

router = APIRouter(prefix="/fields", tags=["Fields"])


@router.post("/map", summary="Map theme meta onto hero, links and seo sections")
async def map_fields(body: FieldMapRequest) -> Dict[str, Any]:
    return map_themerain_fields(body.meta, body.content_type, body.options)


@router.get("/docs", summary="Which meta keys feed each front-matter field")
async def mapping_docs() -> Dict[str, Any]:
    return get_field_mapping_docs()
