import logging

from fastapi import APIRouter

from wp2mdx.models.media import MediaResolutionResult
from wp2mdx.models.request import MediaResolveRequest
from wp2mdx.services.media import resolve_media_ids

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/media", tags=["Media"])


@router.post(
    "/resolve",
    response_model=MediaResolutionResult,
    summary="Resolve WordPress media IDs to local paths",
    description=(
        "Looks every ID up in the supplied `media_data` (raw `/wp/v2/media` "
        "items keyed by ID) and maps its upload URL onto `/images/…`.  "
        "Unknown IDs are listed in `errors`."
    ),
)
async def resolve(body: MediaResolveRequest) -> MediaResolutionResult:
    result = resolve_media_ids(body.media_ids, body.media_data)
    logger.info("Media resolution request", extra={"total": result.stats.total, "failed": result.stats.failed})
    return result
