from pathlib import Path
import time

from fastapi import FastAPI, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from .routers import chat, contact, metrics, preferences, projects
from portfolio.services.knowledge import KNOWLEDGE
from portfolio.utils import logging as _file_logging  # noqa: F401  (loguru file sink)
from portfolio.utils import slog
from portfolio.utils.metrics import record_endpoint, record_request
from portfolio.utils.sanitize import safe_url

BASE_DIR = Path(__file__).resolve().parent

app = FastAPI(title="Portfolio Assistant")

templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))


def _elapsed_ms(started: float) -> int:
    return int((time.perf_counter() - started) * 1000)


def _route_template(request: Request) -> str:
    # "/chat/sessions/{session_id}/messages", never the concrete id
    route = request.scope.get("route")
    return getattr(route, "path", None) or "<unmatched>"


@app.middleware("http")
async def _access_log(request: Request, call_next):
    """
    One JSON line per request (request.completed / request.error), enriched
    with whatever the router bound via slog.bind_context, plus metrics and
    an X-Request-ID header.
    """
    request_id = slog.new_request_id()
    started = time.perf_counter()
    path = request.url.path
    client_ip = request.client.host if request.client else None
    try:
        response = await call_next(request)
    except Exception as e:
        slog.log_event(
            "request.error",
            request_id=request_id,
            method=request.method,
            path=path,
            latency_ms=_elapsed_ms(started),
            client_ip=client_ip,
            error=repr(e),
            **slog.context_of(request),
        )
        raise

    latency_ms = _elapsed_ms(started)
    ctx = slog.context_of(request)
    ctx.setdefault("rate_limited", response.status_code == 429)
    slog.finalize_request_log(
        request_id=request_id,
        method=request.method,
        path=path,
        status=response.status_code,
        latency_ms=latency_ms,
        client_ip=client_ip,
        ctx=ctx,
    )
    record_request(latency_ms)
    record_endpoint(request.method, _route_template(request), latency_ms)
    response.headers["X-Request-ID"] = request_id
    return response


@app.get("/health")
def health():
    return {"status": "ok"}


# Home: hero, about, skills, projects, contact + chat widget mount point
@app.get("/", response_class=HTMLResponse, include_in_schema=False)
def home(request: Request):
    return templates.TemplateResponse(
        request,
        "index.html",
        {
            "kb": KNOWLEDGE,
            "theme": preferences.current_theme(request),
            "taglines": list(KNOWLEDGE.taglines),
            "project_links": {p.slug: safe_url(p.link) for p in KNOWLEDGE.projects},
        },
    )


app.include_router(chat.router)
app.include_router(contact.router)
app.include_router(preferences.router)
app.include_router(projects.router)
app.include_router(metrics.router)
