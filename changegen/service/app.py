"""FastAPI application entrypoint for changegen service mode."""

from __future__ import annotations

import asyncio
from datetime import UTC, datetime
from typing import Any, Callable, Dict, List, Optional

from fastapi import Depends, FastAPI
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from ..models import SectionData, commit_type_for_heading
from ..orchestrator import GenerationOutcome, Orchestrator, ReleasedSection, merge_changelog
from ..parser import ChangelogParser


class GenerateRequest(BaseModel):
    path: str
    output: Optional[str] = None
    url: Optional[str] = None
    follow: List[str] = Field(default_factory=list)
    dry_run: bool = False


class ReleasedModel(BaseModel):
    scope: str
    version: str


class GenerateResponse(BaseModel):
    status: str
    changelog_path: str
    new_content: str
    released: List[ReleasedModel]
    dry_run: bool


class PreviewRequest(BaseModel):
    existing: str = ""
    # scope -> category display name -> rendered entries
    entries: Dict[str, Dict[str, List[str]]] = Field(default_factory=dict)
    tags: List[str] = Field(default_factory=list)
    date: Optional[str] = None


class PreviewResponse(BaseModel):
    content: str
    new_content: str
    released: List[ReleasedModel]
    backfilled: bool


class HealthResponse(BaseModel):
    status: str


def _default_orchestrator() -> Orchestrator:
    return Orchestrator()


def _released(released: List[ReleasedSection]) -> List[ReleasedModel]:
    return [ReleasedModel(scope=item.scope, version=str(item.version)) for item in released]


def _section_from_payload(categories: Dict[str, List[str]]) -> SectionData:
    data = SectionData()
    for name, entries in categories.items():
        commit_type = commit_type_for_heading(name)
        if commit_type is None:
            raise ValueError(f"Unknown category: {name}")
        for entry in entries:
            data.add(commit_type, entry)
            if "!:" in entry:
                data.has_breaking_change = True
    return data


def create_app(
    orchestrator_factory: Callable[[], Orchestrator] = _default_orchestrator,
) -> FastAPI:
    """Create the FastAPI application exposing changegen operations."""

    app = FastAPI(title="Changegen Service", version="1.0.0")

    async def get_orchestrator() -> Orchestrator:
        return orchestrator_factory()

    @app.get("/health", response_model=HealthResponse)
    async def health() -> HealthResponse:
        return HealthResponse(status="ok")

    @app.post("/generate", response_model=GenerateResponse)
    async def generate(
        payload: GenerateRequest,
        orchestrator: Orchestrator = Depends(get_orchestrator),
    ) -> GenerateResponse:
        def _run_generate() -> GenerationOutcome:
            return orchestrator.run_generate(
                payload.path,
                output=payload.output,
                url=payload.url,
                follow=payload.follow or None,
                dry_run=payload.dry_run,
            )

        loop = asyncio.get_running_loop()
        outcome = await loop.run_in_executor(None, _run_generate)
        return GenerateResponse(
            status="ok" if outcome.changed else "unchanged",
            changelog_path=str(outcome.path),
            new_content=outcome.new_content,
            released=_released(outcome.released),
            dry_run=outcome.dry_run,
        )

    @app.post("/preview", response_model=PreviewResponse)
    async def preview(payload: PreviewRequest) -> PreviewResponse:
        document = ChangelogParser().load(payload.existing)
        scopes = [
            (scope, _section_from_payload(categories))
            for scope, categories in payload.entries.items()
        ]
        date = payload.date or datetime.now(UTC).strftime("%Y-%m-%d")
        result = merge_changelog(scopes, document, payload.tags, date)
        return PreviewResponse(
            content=result.content,
            new_content=result.new_content,
            released=_released(result.released),
            backfilled=result.backfilled,
        )

    @app.exception_handler(ValueError)
    async def value_error_handler(_: Any, exc: ValueError) -> JSONResponse:
        return JSONResponse(status_code=422, content={"detail": str(exc)})

    @app.exception_handler(RuntimeError)
    async def runtime_error_handler(_: Any, exc: RuntimeError) -> JSONResponse:
        return JSONResponse(status_code=400, content={"detail": str(exc)})

    return app


def run_service(host: str = "127.0.0.1", port: int = 8000) -> None:  # pragma: no cover - integration path
    import uvicorn

    uvicorn.run(create_app(), host=host, port=port)
