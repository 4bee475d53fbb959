"""FastAPI HTTP API server for the assistant panel."""

import ipaddress
import logging
from pathlib import Path

from lifeassist import __version__
from lifeassist.core.config import resolve_vault
from lifeassist.core.vault import VaultPathError
from lifeassist.llm.assistant import Assistant

log = logging.getLogger(__name__)


def _is_localhost(client_host: str) -> bool:
    """Check if the request comes from localhost."""
    try:
        addr = ipaddress.ip_address(client_host)
        return addr.is_loopback
    except ValueError:
        return client_host in ("localhost", "127.0.0.1", "::1")


def context_payload(assistant: Assistant) -> dict:
    snapshot = assistant.context.snapshot
    status = assistant.token_status()
    return {
        "folder": assistant.context.folder,
        "active_note": assistant.context.active_note.path if assistant.context.active_note else None,
        "source": str(getattr(snapshot.source, "value", snapshot.source)),
        "files": snapshot.files,
        "skipped": snapshot.skipped,
        "notices": snapshot.notices,
        "description": assistant.context.describe(),
        "tokens": token_payload(status),
    }


def token_payload(status) -> dict:
    return {
        "context": status.context_tokens,
        "prompt": status.prompt_tokens,
        "total": status.total,
        "max": status.max_tokens,
        "exceeded": status.exceeded,
        "text": status.describe(),
    }


def create_app(
    vault: Path | None = None,
    api_key: str | None = None,
    cors_origins: list[str] | None = None,
    enable_ui: bool = False,
    assistant: Assistant | None = None,
):
    """Create and configure the FastAPI application.

    Args:
        vault: Override LA_VAULT path.
        api_key: Optional static key for remote access. None = no auth needed.
        cors_origins: List of allowed CORS origins.
        enable_ui: Mount the web panel at /ui/*.
        assistant: Pre-built session (tests); opened from the vault otherwise.
    """
    try:
        from fastapi import FastAPI, HTTPException, Query, Request
        from fastapi.responses import JSONResponse
    except ImportError as e:
        raise ImportError(
            "FastAPI is required for the web panel. "
            "Install with: pip install lifeassist[ui]"
        ) from e

    vault_path = vault or resolve_vault()
    if assistant is None:
        assistant = Assistant(vault_path).open()

    app = FastAPI(
        title="AI Life Assistant API",
        description="Ask a chat model about the notes in a vault",
        version=__version__,
    )
    app.state.assistant = assistant

    if cors_origins:
        from fastapi.middleware.cors import CORSMiddleware

        app.add_middleware(
            CORSMiddleware,
            allow_origins=cors_origins,
            allow_methods=["*"],
            allow_headers=["*"],
        )

    def _check_auth(request: Request) -> None:
        """Check API key for non-localhost requests."""
        if not api_key:
            return
        client = request.client.host if request.client else "127.0.0.1"
        if _is_localhost(client):
            return
        if request.headers.get("authorization", "") == f"Bearer {api_key}":
            return
        raise HTTPException(status_code=401, detail="Invalid or missing API key")

    @app.get("/api/health")
    def health(request: Request):
        _check_auth(request)
        return {
            "status": "ok",
            "version": __version__,
            "vault": str(assistant.vault.root),
            "busy": assistant.busy,
        }

    @app.get("/api/context")
    def get_context(request: Request):
        _check_auth(request)
        return context_payload(assistant)

    @app.post("/api/context")
    def set_context(request: Request, body: dict):
        _check_auth(request)
        if assistant.busy:
            raise HTTPException(status_code=409, detail="A request is in progress")
        if "note" in body:
            assistant.set_active_note(body.get("note") or None)
        if "folder" in body:
            try:
                assistant.select_folder(body.get("folder") or "")
            except VaultPathError as e:
                raise HTTPException(status_code=404, detail=str(e)) from e
        return context_payload(assistant)

    @app.get("/api/tokens")
    def tokens(request: Request, prompt: str = Query("", description="Pending prompt")):
        _check_auth(request)
        return token_payload(assistant.token_status(prompt))

    @app.get("/api/folders")
    def folders(request: Request):
        _check_auth(request)
        result = assistant.list_folders()
        return {"count": len(result), "folders": result}

    @app.get("/api/prompts")
    def prompts(request: Request):
        _check_auth(request)
        notes = assistant.prompt_files()
        return {
            "count": len(notes),
            "notice": assistant.prompt_files_notice(),
            "default": assistant.settings.prompt_file_path,
            "prompts": [n.path for n in notes],
        }

    @app.get("/api/prompts/content")
    def prompt_content(request: Request, path: str = Query(..., description="Prompt file path")):
        _check_auth(request)
        note = assistant.vault.get_note(path)
        if note is None:
            raise HTTPException(status_code=404, detail=f"Prompt file not found: {path}")
        return {"path": note.path, "content": assistant.vault.read_note(note)}

    @app.post("/api/ask")
    def ask_endpoint(request: Request, body: dict):
        _check_auth(request)
        prompt = body.get("prompt", "")
        if not isinstance(prompt, str):
            raise HTTPException(status_code=400, detail="'prompt' must be a string")
        result = assistant.ask(prompt)
        return {
            "prompt": result.prompt,
            "answer": result.answer,
            "error": result.error,
            "timestamp": result.entry.timestamp if result.entry else None,
        }

    @app.post("/api/summarize")
    def summarize_endpoint(request: Request, body: dict):
        _check_auth(request)
        text = body.get("text", "")
        if not isinstance(text, str):
            raise HTTPException(status_code=400, detail="'text' must be a string")
        result = assistant.summarize_selection(text)
        return {"summary": result.answer, "error": result.error}

    @app.get("/api/history")
    def history(request: Request):
        _check_auth(request)
        entries = assistant.history
        return {
            "count": len(entries),
            "entries": [e.to_dict() for e in entries],
        }

    if enable_ui:
        try:
            from lifeassist.ui.app import mount_ui

            mount_ui(app, assistant, check_auth=_check_auth)
            log.info("Web panel mounted at /ui")
        except ImportError:
            log.warning(
                "Web panel dependencies not installed. "
                "Install with: pip install lifeassist[ui]"
            )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        log.error("Unhandled error: %s", exc, exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )

    return app
