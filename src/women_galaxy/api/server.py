"""
FastAPI server for importing a single woman's profile from the web UI.

This provides REST API endpoints for:
- Importing one profile by name (optionally with an exact Wikipedia title)
- Health checks

Usage:
    uvicorn women_galaxy.api.server:app --port 8000
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ConfigDict, Field

from women_galaxy.config import get_config
from women_galaxy.core.models import ImportRequest, ImportStatus
from women_galaxy.core.service import ProfileImportService
from women_galaxy.utils.logging import get_logger

logger = get_logger(__name__)


class ImportWomanBody(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    name: str | None = None
    wiki_title: str | None = Field(default=None, alias="wikiTitle")


def _status_for(failure_kind: str | None) -> int:
    return 404 if failure_kind == "not_found" else 500


def create_app(service: ProfileImportService | None = None) -> FastAPI:
    """Build the API app.

    Without an explicit service one is built from the environment at startup, so
    missing storage credentials fail the server before any request is served.
    """

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        owns_service = getattr(app.state, "service", None) is None
        if owns_service:
            app.state.service = ProfileImportService(config=get_config(), created_by="web-import")
        await app.state.service.prepare()
        try:
            yield
        finally:
            if owns_service:
                await app.state.service.close()

    app = FastAPI(
        title="Women Galaxy Import API",
        description="Import notable women's profiles from Wikipedia",
        version="1.0.0",
        lifespan=lifespan,
    )
    app.state.service = service

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["http://localhost:3000"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.exception_handler(RequestValidationError)
    async def invalid_body(request: Request, exc: RequestValidationError):
        # Any body that does not parse into ImportWomanBody is reported as a missing name
        logger.info("Rejected import request body", path=request.url.path, errors=len(exc.errors()))
        return JSONResponse(status_code=400, content={"detail": "Name is required"})

    @app.post("/api/import-woman")
    async def import_woman(body: ImportWomanBody, request: Request):
        """Import one profile and return it."""
        if not body.name or not body.name.strip():
            raise HTTPException(status_code=400, detail="Name is required")

        import_service: ProfileImportService = request.app.state.service
        outcome = await import_service.import_one(
            ImportRequest(name=body.name.strip(), wiki_title=body.wiki_title or None)
        )

        if outcome.status == ImportStatus.SKIPPED:
            raise HTTPException(status_code=409, detail=f'"{outcome.name}" already exists in the database')
        if outcome.status == ImportStatus.FAILED:
            logger.warning("Import failed", name=outcome.name, reason=outcome.reason, kind=outcome.failure_kind)
            raise HTTPException(status_code=_status_for(outcome.failure_kind), detail=outcome.reason)

        extracted = outcome.extracted
        return {
            "profile": {
                "id": outcome.profile_id,
                "name": outcome.name,
                "intro": extracted.intro if extracted else None,
                "accomplishments": extracted.accomplishments if extracted else None,
                "image_url": outcome.image_url,
                "tags": extracted.tags if extracted else [],
                "birth_year": extracted.birth_year if extracted else None,
                "created_by": import_service.created_by,
            }
        }

    @app.get("/api/health")
    async def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    return app


app = create_app()
