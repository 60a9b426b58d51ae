import logging

from fastapi import FastAPI
from fastapi.openapi.utils import get_openapi

from resume_bench.api.routes.parse import router as parse_router
from resume_bench.api.routes.profiles import router as profiles_router
from resume_bench.core import config
from resume_bench.core.profiles import list_profiles

logging.basicConfig(
    level=config.LOG_LEVEL,
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)

app = FastAPI(
    title="Resume Bench (Heuristic Resume Parsing Service)",
    description="Heuristic resume parsing with competing parser profiles, schema normalization and content-coverage scoring",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)

app.include_router(parse_router)
app.include_router(profiles_router)

@app.get("/", tags=["health"])
def root():
    return {"service": "resume-bench", "status": "running"}

@app.get("/health", tags=["health"])
def health():
    return {"status": "ok"}

def custom_openapi():
    """Generate OpenAPI schema whose description lists the registered parser profiles."""
    if app.openapi_schema:
        return app.openapi_schema
    profile_lines = "\n".join(f"- `{p.id}`: {p.description}" for p in list_profiles())
    openapi_schema = get_openapi(
        title=app.title,
        version=app.version,
        description=f"{app.description}\n\n**Parser profiles** (pass as `profile`):\n\n{profile_lines}",
        routes=app.routes,
    )
    app.openapi_schema = openapi_schema
    return app.openapi_schema

app.openapi = custom_openapi
