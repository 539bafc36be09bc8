"""FastAPI application entrypoint for ci-dokumentor service mode."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from .. import __version__
from ..concurrency import DEFAULT_CONCURRENCY, FileResult
from ..config import ConfigError, parse_sections
from ..formatter.base import LinkFormat
from ..generator import MappingSectionProvider
from ..renderer import WriteCoordinator
from ..usecases import (
    GenerateDocumentationUseCase,
    MigrateDocumentationUseCase,
    UnknownToolError,
    build_generator_service,
    build_migration_service,
)


class MigrateRequest(BaseModel):
    destinations: List[str] = Field(min_length=1)
    tool: Optional[str] = None
    dry_run: bool = False
    scaffold: bool = False
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)


class GenerateRequest(BaseModel):
    destinations: List[str] = Field(min_length=1)
    sections: Dict[str, str]
    only: Optional[List[str]] = None
    dry_run: bool = False
    link_format: LinkFormat = LinkFormat.AUTO
    concurrency: int = Field(default=DEFAULT_CONCURRENCY, ge=1)


class FileResultModel(BaseModel):
    destination: str
    success: bool
    data: Optional[str] = None
    error: Optional[str] = None


class BatchResponse(BaseModel):
    status: str
    results: List[FileResultModel]


class HealthResponse(BaseModel):
    status: str


class ToolsResponse(BaseModel):
    tools: List[str]


def _to_response(results: List[FileResult]) -> BatchResponse:
    status = "ok" if all(result.success for result in results) else "partial"
    if not any(result.success for result in results):
        status = "failed"
    return BatchResponse(
        status=status,
        results=[
            FileResultModel(
                destination=str(result.destination),
                success=result.success,
                data=result.data,
                error=result.error,
            )
            for result in results
        ],
    )


def create_app(coordinator: Optional[WriteCoordinator] = None) -> FastAPI:
    """Create the FastAPI application exposing migrate and generate."""

    app = FastAPI(title="ci-dokumentor Service", version=__version__)
    # Shared by every request so writes to one file stay serialised.
    shared = coordinator or WriteCoordinator()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.get("/tools", response_model=ToolsResponse)
    async def tools() -> ToolsResponse:
        return ToolsResponse(tools=build_migration_service(coordinator=shared).supported_tools())

    @app.post("/migrate", response_model=BatchResponse)
    async def migrate(payload: MigrateRequest) -> BatchResponse:
        use_case = MigrateDocumentationUseCase(
            build_migration_service(scaffold=payload.scaffold, coordinator=shared)
        )
        results = await use_case.execute(
            [Path(path) for path in payload.destinations],
            tool=payload.tool,
            dry_run=payload.dry_run,
            concurrency=payload.concurrency,
        )
        return _to_response(results)

    @app.post("/generate", response_model=BatchResponse)
    async def generate(payload: GenerateRequest) -> BatchResponse:
        provider = MappingSectionProvider.from_mapping(payload.sections, source="request")
        sections = parse_sections(payload.only) if payload.only else None
        use_case = GenerateDocumentationUseCase(
            build_generator_service(link_format=payload.link_format, coordinator=shared)
        )
        results = await use_case.execute(
            [Path(path) for path in payload.destinations],
            provider,
            sections=sections,
            dry_run=payload.dry_run,
            concurrency=payload.concurrency,
        )
        return _to_response(results)

    @app.exception_handler(ConfigError)
    async def config_error_handler(_: Any, exc: ConfigError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    @app.exception_handler(UnknownToolError)
    async def unknown_tool_handler(_: Any, exc: UnknownToolError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    uvicorn.run(create_app(), host=host, port=port)


__all__ = [
    "BatchResponse",
    "GenerateRequest",
    "MigrateRequest",
    "create_app",
    "run_service",
]
