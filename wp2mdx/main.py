import logging
import logging.config

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from wp2mdx.routers.convert import router as convert_router
from wp2mdx.routers.export import limiter, router as export_router
from wp2mdx.routers.fields import router as fields_router
from wp2mdx.routers.media import router as media_router
from wp2mdx.routers.slugs import router as slugs_router
from wp2mdx.routers.validate import router as validate_router

logging.config.dictConfig(
    {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "json": {
                "format": '{"time": "%(asctime)s", "level": "%(levelname)s", "logger": "%(name)s", "message": "%(message)s"}',
            },
        },
        "handlers": {
            "console": {
                "class": "logging.StreamHandler",
                "formatter": "json",
            },
        },
        "root": {"level": "INFO", "handlers": ["console"]},
    }
)

logger = logging.getLogger(__name__)

app = FastAPI(
    title="wp2mdx – WordPress to MDX migration API",
    description=(
        "Converts WordPress content to MDX with validated front-matter: HTML "
        "clean-up, media resolution, theme field mapping, SEO/schema defaults, "
        "slug conflict handling and export reports."
    ),
    version="1.0.0",
)

# Rate-limiting state
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)


@app.exception_handler(Exception)
async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled exception for %s", request.url)
    return JSONResponse(status_code=500, content={"detail": "An unexpected error occurred."})


app.include_router(convert_router)
app.include_router(media_router)
app.include_router(fields_router)
app.include_router(validate_router)
app.include_router(slugs_router)
app.include_router(export_router)


@app.get("/", summary="Health check")
async def root() -> dict:
    return {"message": "Hello from wp2mdx"}
