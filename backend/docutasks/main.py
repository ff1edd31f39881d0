from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from .core.config import settings
from .core.errors import DocuTasksError
from .core.logging import get_logger
from .api.v1 import health, documents

logger = get_logger(__name__)

app = FastAPI(title=settings.APP_NAME)
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.include_router(health.router,    prefix=settings.API_V1_PREFIX)
app.include_router(documents.router, prefix=settings.API_V1_PREFIX)

@app.exception_handler(DocuTasksError)
def docutasks_error(request: Request, exc: DocuTasksError):
    logger.error("Request %s failed (%s): %s", request.url.path, exc.category, exc)
    status = 429 if exc.category == "quota" else 500
    content = {
        "error": exc.summary,
        "details": str(exc),
        "category": exc.category,
        "timestamp": datetime.now(timezone.utc).isoformat(),
    }
    if exc.hint:
        content["hint"] = exc.hint
    return JSONResponse(status_code=status, content=content)

@app.on_event("startup")
def on_startup():
    if settings.LLM_PROVIDER == "openai" and not settings.OPENAI_API_KEY:
        logger.error("OPENAI_API_KEY is missing or empty; analysis requests will fail")
    logger.info("%s started with provider %s, model %s",
                settings.APP_NAME, settings.LLM_PROVIDER, settings.AI_MODEL)
