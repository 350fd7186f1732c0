"""FastAPI application exposing the audit pipeline over JSON.

Missing parameters and check failures are reported in the response body
with HTTP 200, not through the status code.
"""

import logging
from contextlib import asynccontextmanager
from typing import Any, Optional

from fastapi import APIRouter, Body, Depends, FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from pydantic import BaseModel
from starlette.exceptions import HTTPException as StarletteHTTPException

from pageaudit.config import Config
from pageaudit.content_score import ContentScorer
from pageaudit.exceptions import MissingParameter
from pageaudit.fetcher import Fetcher
from pageaudit.orchestrator import AuditOrchestrator
from pageaudit.serp import SerpResolver
from pageaudit.store import ProjectStore
from pageaudit.suggestions import KeywordSuggester

logger = logging.getLogger(__name__)

# Endpoint path -> check name
CHECK_ROUTES = {
    "/seo": "seo",
    "/broken-links": "broken_links",
    "/meta": "meta",
    "/alts": "alts",
    "/robots": "robots",
    "/sitemap": "sitemap",
    "/pagespeed": "pagespeed",
    "/links-report": "links_report",
    "/headings": "headings",
    "/wordcount": "wordcount",
    "/keywords": "keywords",
    "/tech": "tech",
}


class ContentScoreRequest(BaseModel):
    html: Optional[str] = None
    text: Optional[str] = None
    keyword: Optional[str] = None


# Dependencies (overridable in tests)

def get_orchestrator(request: Request) -> AuditOrchestrator:
    return request.app.state.orchestrator


def get_serp_resolver(request: Request) -> SerpResolver:
    return request.app.state.serp_resolver


def get_suggester(request: Request) -> KeywordSuggester:
    return request.app.state.suggester


def get_project_store(request: Request) -> ProjectStore:
    return request.app.state.projects


def get_content_scorer(request: Request) -> ContentScorer:
    return ContentScorer(request.app.state.config.thresholds)


def missing(field: str) -> dict[str, str]:
    return {"error": MissingParameter(field).message}


async def run_check_endpoint(orchestrator: AuditOrchestrator, name: str, url: Optional[str]) -> dict[str, Any]:
    """Run one check and shape its result for the wire."""
    if not url:
        return missing("URL")
    check = orchestrator.get_check(name)
    try:
        payload = await orchestrator.run_check(name, url)
    except Exception as e:
        logger.info(f"Check {name} failed for {url}: {e!r}")
        return check.failure_payload(e)
    return {**payload, "status": "success"}


def _check_endpoint(name: str):
    async def endpoint(
        url: Optional[str] = None,
        orchestrator: AuditOrchestrator = Depends(get_orchestrator),
    ) -> dict[str, Any]:
        return await run_check_endpoint(orchestrator, name, url)

    endpoint.__name__ = f"{name}_check"
    return endpoint


router = APIRouter(prefix="/api")

for _path, _name in CHECK_ROUTES.items():
    router.add_api_route(_path, _check_endpoint(_name), methods=["GET"], tags=["Checks"])


@router.get("/health", tags=["Health"])
async def health_check():
    return {"status": "OK"}


@router.get("/all", tags=["Checks"])
async def full_audit(
    url: Optional[str] = None,
    orchestrator: AuditOrchestrator = Depends(get_orchestrator),
):
    if not url:
        return missing("URL")
    report = await orchestrator.run_full_audit(url)
    return report.to_dict()


@router.get("/keyword/serp", tags=["Keywords"])
async def keyword_serp(
    keyword: Optional[str] = None,
    resolver: SerpResolver = Depends(get_serp_resolver),
):
    keyword = (keyword or "").strip()
    if not keyword:
        return missing("keyword")
    entries = await resolver.fetch_serp(keyword)
    return {"keyword": keyword, "serp": [entry.to_dict() for entry in entries]}


@router.get("/keyword/overview", tags=["Keywords"])
async def keyword_overview(
    keyword: Optional[str] = None,
    resolver: SerpResolver = Depends(get_serp_resolver),
):
    """Keyword overview; volume and difficulty metrics are not estimated."""
    keyword = (keyword or "").strip()
    if not keyword:
        return missing("keyword")
    entries = await resolver.fetch_serp(keyword)
    return {
        "keyword": keyword,
        "result_count": len(entries),
        "serp": [entry.to_dict() for entry in entries],
    }


@router.get("/keyword/suggestions", tags=["Keywords"])
async def keyword_suggestions(
    keyword: Optional[str] = None,
    suggester: KeywordSuggester = Depends(get_suggester),
):
    keyword = (keyword or "").strip()
    if not keyword:
        return missing("keyword")
    return {"keyword": keyword, "suggestions": await suggester.suggestions(keyword)}


@router.get("/keyword/questions", tags=["Keywords"])
async def keyword_questions(
    keyword: Optional[str] = None,
    suggester: KeywordSuggester = Depends(get_suggester),
):
    keyword = (keyword or "").strip()
    if not keyword:
        return missing("keyword")
    return {"keyword": keyword, "questions": await suggester.questions(keyword)}


@router.get("/keyword/comparisons", tags=["Keywords"])
async def keyword_comparisons(
    keyword: Optional[str] = None,
    keywords: Optional[str] = None,
    suggester: KeywordSuggester = Depends(get_suggester),
):
    return {"comparisons": await suggester.comparisons(keyword=keyword, keywords=keywords)}


@router.post("/content/score", tags=["Content"])
async def content_score(
    payload: ContentScoreRequest,
    scorer: ContentScorer = Depends(get_content_scorer),
):
    content = scorer.extract_text(html=payload.html, text=payload.text)
    if not content:
        return missing("text")
    return scorer.score(content, payload.keyword).to_dict()


@router.post("/project/add", tags=["Projects"])
async def add_project(
    data: Optional[dict[str, Any]] = Body(default=None),
    store: ProjectStore = Depends(get_project_store),
):
    return {"created": store.create(data or {})}


@router.get("/projects", tags=["Projects"])
async def list_projects(store: ProjectStore = Depends(get_project_store)):
    return {"projects": store.values()}


@router.get("/project/{project_id}", tags=["Projects"])
async def get_project(project_id: str, store: ProjectStore = Depends(get_project_store)):
    project = store.get(project_id)
    if project is None:
        return {"error": "project not found"}
    return {"project": project}


@router.delete("/project/{project_id}", tags=["Projects"])
async def delete_project(project_id: str, store: ProjectStore = Depends(get_project_store)):
    return {"deleted": store.delete(project_id)}


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Create the shared fetcher and services; close the fetcher on shutdown."""
    config: Config = app.state.config
    fetcher = Fetcher(
        user_agent=config.user_agent,
        timeout=config.timeout,
        probe_timeout=config.probe_timeout,
        max_redirects=config.max_redirects,
    )
    app.state.orchestrator = AuditOrchestrator(fetcher, config)
    app.state.serp_resolver = SerpResolver(fetcher, max_results=config.max_serp_results)
    app.state.suggester = KeywordSuggester(fetcher)
    app.state.projects = ProjectStore()
    logger.info("Page audit API starting up")

    yield

    await fetcher.aclose()
    logger.info("Page audit API shutting down")


def create_app(config: Optional[Config] = None) -> FastAPI:
    """Factory function to create the FastAPI application."""
    app = FastAPI(
        title="Page Audit API",
        description="Page audit, link health and keyword research",
        version="0.1.0",
        lifespan=lifespan,
    )
    app.state.config = config or Config.from_env()

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(router)

    @app.exception_handler(StarletteHTTPException)
    async def http_exception_handler(request: Request, exc: StarletteHTTPException):
        if exc.status_code == 404:
            return JSONResponse({"error": "Route not found", "path": request.url.path}, status_code=404)
        return JSONResponse({"error": str(exc.detail)}, status_code=exc.status_code)

    return app
