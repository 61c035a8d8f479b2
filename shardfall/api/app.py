"""
FastAPI Application - REST API for match clients.

Endpoints:
    GET    /api/v1/health                        Health check
    GET    /api/v1/catalog                       List card archetypes
    POST   /api/v1/matches                       Create a match
    GET    /api/v1/matches                       List active matches
    GET    /api/v1/matches/{id}?viewer=N         Snapshot for one player
    DELETE /api/v1/matches/{id}                  End a match
    POST   /api/v1/matches/{id}/actions          Submit an action
    GET    /api/v1/matches/{id}/log?viewer=N     Redacted game log

Bot seats act automatically: every response reflects the match after
the bots answered their offers.

All responses are JSON with explicit Pydantic schemas.
"""

from typing import Union
import logging
import os

from .. import __version__

# Environment configuration
SHARDFALL_ENV = os.getenv("SHARDFALL_ENV", "development")
ALLOWED_ORIGINS = os.getenv("ALLOWED_ORIGINS", "*").split(",")

logger = logging.getLogger(__name__)


def create_app(service=None):
    """
    Create the FastAPI application.

    Args:
        service: Optional MatchService instance (creates new if not provided)

    Returns:
        FastAPI application instance
    """
    try:
        from fastapi import FastAPI, Query
        from fastapi.middleware.cors import CORSMiddleware
        from fastapi.responses import JSONResponse
    except ImportError:
        raise ImportError(
            "FastAPI not installed. Install with: pip install 'shardfall[api]'"
        )

    from .service import MatchService
    from .schemas import (
        # Request models
        CreateMatchRequest,
        ActionRequest,
        # Response models
        MatchResponse,
        SnapshotResponse,
        ActionResponse,
        LogResponse,
        CatalogEntry,
        MatchListResponse,
        ErrorResponse,
        HealthResponse,
        # Enums
        ErrorCode,
    )

    app = FastAPI(
        title="Shardfall Engine API",
        description="""
Deterministic card-game rules engine.

## Error Codes

| Code | Description |
|------|-------------|
| `MATCH_NOT_FOUND` | Match does not exist |
| `INVALID_DECK` | Deck list failed to parse or broke the regulation |
| `INVALID_ACTION` | The engine rejected the action; `details.reason` has the engine code |
| `SESSION_BUSY` | Too many queued actions |
| `VALIDATION_ERROR` | Request could not be converted |
        """,
        version=__version__,
        docs_url="/api/docs",
        redoc_url="/api/redoc",
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    match_service = service or MatchService()

    # =========================================================================
    # Error helpers
    # =========================================================================

    status_codes = {
        ErrorCode.MATCH_NOT_FOUND: 404,
        ErrorCode.SESSION_BUSY: 429,
        ErrorCode.INTERNAL_ERROR: 500,
    }

    def make_error_response(error: ErrorResponse) -> JSONResponse:
        """Create a standardized error response."""
        return JSONResponse(
            status_code=status_codes.get(error.error_code, 400),
            content=error.model_dump(mode="json"),
        )

    # =========================================================================
    # Health & catalog
    # =========================================================================

    @app.get("/api/v1/health", response_model=HealthResponse, tags=["System"])
    async def health() -> HealthResponse:
        return HealthResponse(version=__version__, environment=SHARDFALL_ENV)

    @app.get("/api/v1/catalog", response_model=list[CatalogEntry], tags=["Catalog"])
    async def list_catalog() -> list[CatalogEntry]:
        """All card archetypes with rendered card text."""
        return match_service.list_catalog()

    # =========================================================================
    # Matches
    # =========================================================================

    @app.post(
        "/api/v1/matches",
        response_model=MatchResponse,
        responses={400: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Create a match",
    )
    async def create_match(body: CreateMatchRequest) -> Union[MatchResponse, JSONResponse]:
        """
        Create a match. Each seat names a starter deck or gives deck-list text,
        and may be taken by a bot.
        """
        result = match_service.create_match(body)
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        logger.info("Match %s created", result.match_id)
        return result

    @app.get("/api/v1/matches", response_model=MatchListResponse, tags=["Matches"])
    async def list_matches() -> MatchListResponse:
        matches = match_service.list_matches()
        return MatchListResponse(matches=matches, count=len(matches))

    @app.get(
        "/api/v1/matches/{match_id}",
        response_model=SnapshotResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
        summary="Snapshot of a match for one player",
    )
    async def get_snapshot(
        match_id: str,
        viewer: int = Query(0, description="Player whose view to return"),
    ) -> Union[SnapshotResponse, JSONResponse]:
        result = match_service.get_snapshot(match_id, viewer)
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    @app.delete(
        "/api/v1/matches/{match_id}",
        responses={404: {"model": ErrorResponse}},
        tags=["Matches"],
    )
    async def end_match(match_id: str):
        if not match_service.end_match(match_id):
            return make_error_response(ErrorResponse(
                error=f"Match {match_id} not found",
                error_code=ErrorCode.MATCH_NOT_FOUND,
            ))
        return {"match_id": match_id, "ended": True}

    # =========================================================================
    # Play
    # =========================================================================

    @app.post(
        "/api/v1/matches/{match_id}/actions",
        response_model=ActionResponse,
        responses={
            400: {"model": ErrorResponse, "description": "Action rejected"},
            404: {"model": ErrorResponse, "description": "Match not found"},
            429: {"model": ErrorResponse, "description": "Match busy"},
        },
        tags=["Play"],
        summary="Submit an action",
    )
    async def submit_action(match_id: str, body: ActionRequest) -> Union[ActionResponse, JSONResponse]:
        """
        Submit an action for a player. A rejected action leaves the match
        unchanged; the same actions stay on offer.
        """
        result = match_service.submit_action(match_id, body)
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    @app.get(
        "/api/v1/matches/{match_id}/log",
        response_model=LogResponse,
        responses={404: {"model": ErrorResponse}},
        tags=["Play"],
    )
    async def get_log(
        match_id: str,
        viewer: int = Query(0),
        offset: int = Query(0, ge=0),
    ) -> Union[LogResponse, JSONResponse]:
        """Game log from offset, redacted for the viewer."""
        result = match_service.get_log(match_id, viewer, offset)
        if isinstance(result, ErrorResponse):
            return make_error_response(result)
        return result

    return app
