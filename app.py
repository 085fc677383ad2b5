from __future__ import annotations

from contextlib import asynccontextmanager
from pathlib import Path
from typing import Any, AsyncIterator

from dotenv import load_dotenv
from fastapi import Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from fastapi.staticfiles import StaticFiles
from pydantic import BaseModel

from deepwiki.connection import DeepWikiConnection
from deepwiki.errors import error_message
from deepwiki.settings import CLIENT_VERSION, load_settings
from tools import ask_question, wiki_contents, wiki_structure
from tools.registry import run_tool
from tools.types import MissingArgumentsError, ToolContext
from tracing.logger import get_logger

_dotenv_path = Path(__file__).parent / ".env"
if _dotenv_path.exists():
    load_dotenv(dotenv_path=_dotenv_path, override=True)
else:
    # Fallback to CWD-based discovery (e.g., when running from repo root)
    load_dotenv(override=True)

settings = load_settings()
logger = get_logger("deepwiki_proxy", settings.log_level)
connection = DeepWikiConnection(settings)


class AskRequest(BaseModel):
    owner: str | None = None
    repo: str | None = None
    question: str | None = None


class Envelope(BaseModel):
    ok: bool
    data: list[dict[str, Any]] | None = None
    error: str | None = None


def _frontend_dir() -> Path:
    return Path(__file__).parent / "frontend"


@asynccontextmanager
async def lifespan(_app: FastAPI) -> AsyncIterator[None]:
    yield
    await connection.close()


app = FastAPI(title="deepwiki-proxy", version=CLIENT_VERSION, lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins),
    allow_methods=["GET", "POST"],
    allow_headers=["*"],
)

frontend_dir = _frontend_dir()
if frontend_dir.exists():
    app.mount("/static", StaticFiles(directory=str(frontend_dir)), name="static")


def get_tool_context() -> ToolContext:
    return ToolContext(connection=connection)


def _error(message: str, status_code: int) -> JSONResponse:
    body = Envelope(ok=False, error=message).model_dump(exclude_none=True)
    return JSONResponse(status_code=status_code, content=body)


@app.exception_handler(RequestValidationError)
async def request_validation_error(_request: Request, exc: RequestValidationError) -> JSONResponse:
    messages = [str(e.get("msg", "")).strip() for e in exc.errors()]
    return _error("; ".join(m for m in messages if m) or "invalid request", 400)


async def _invoke(tool_name: str, args: dict[str, Any], ctx: ToolContext) -> Any:
    try:
        data = await run_tool(tool_name, args, ctx)
    except MissingArgumentsError as e:
        return _error(str(e), 400)
    except Exception as e:
        logger.exception("%s failed", tool_name)
        return _error(error_message(e), 500)
    return Envelope(ok=True, data=data)


@app.get("/")
def index() -> Any:
    index_path = _frontend_dir() / "index.html"
    if not index_path.exists():
        raise HTTPException(status_code=404, detail="frontend/index.html not found")
    return FileResponse(index_path)


@app.get("/healthz")
def healthz() -> dict[str, str]:
    return {"status": "ok"}


@app.get("/api/structure", response_model=Envelope, response_model_exclude_none=True)
async def structure(
    owner: str = "",
    repo: str = "",
    ctx: ToolContext = Depends(get_tool_context),
) -> Any:
    return await _invoke(wiki_structure.SPEC.name, {"owner": owner, "repo": repo}, ctx)


@app.get("/api/contents", response_model=Envelope, response_model_exclude_none=True)
async def contents(
    owner: str = "",
    repo: str = "",
    topic: str = "",
    ctx: ToolContext = Depends(get_tool_context),
) -> Any:
    return await _invoke(wiki_contents.SPEC.name, {"owner": owner, "repo": repo, "topic": topic}, ctx)


@app.post("/api/ask", response_model=Envelope, response_model_exclude_none=True)
async def ask(
    req: AskRequest | None = None,
    ctx: ToolContext = Depends(get_tool_context),
) -> Any:
    args = req.model_dump() if req is not None else {}
    return await _invoke(ask_question.SPEC.name, args, ctx)


def main() -> None:
    import uvicorn

    logger.info("DeepWiki MCP proxy running on http://%s:%s", settings.host, settings.port)
    uvicorn.run(app, host=settings.host, port=settings.port, log_level=settings.log_level.lower())


if __name__ == "__main__":
    main()
