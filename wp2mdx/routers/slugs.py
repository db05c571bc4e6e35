from fastapi import APIRouter

from wp2mdx.models.request import SlugResolveRequest
from wp2mdx.models.slug import SlugResolutionResult
from wp2mdx.services.slugs import resolve_slug_conflicts

router = APIRouter(prefix="/slugs", tags=["Slugs"])


@router.post(
    "/resolve",
    response_model=SlugResolutionResult,
    summary="Resolve slug collisions across content types",
    description=(
        "Items sharing a slug are ranked page > project > post; the winner "
        "keeps the slug and the others become `<slug>-<type>`."
    ),
)
async def resolve(body: SlugResolveRequest) -> SlugResolutionResult:
    return resolve_slug_conflicts(body.items)
