"""Web panel routes: Jinja2 + HTMX, responses rendered as Markdown."""

import logging
from pathlib import Path

from lifeassist import __version__
from lifeassist.core.vault import VaultPathError
from lifeassist.llm.assistant import Assistant

log = logging.getLogger(__name__)

# Dependency guard
try:
    import markdown
    from jinja2 import Environment, FileSystemLoader
    from markupsafe import Markup

    HAS_UI = True
except ImportError:
    HAS_UI = False

_TEMPLATES_DIR = Path(__file__).parent / "templates"


def render_markdown(text: str) -> "Markup":
    """Render a model response (Markdown) to HTML.

    Raw HTML in the response is not passed through; it shows up as text.
    """
    md = markdown.Markdown(extensions=["fenced_code", "tables"])
    md.preprocessors.deregister("html_block")
    md.inlinePatterns.deregister("html")
    return Markup(md.convert(text or ""))


def mount_ui(app, assistant: Assistant, check_auth=None) -> None:
    """Register all /ui/* routes on the FastAPI app.

    Args:
        app: FastAPI application instance.
        assistant: The session the panel drives.
        check_auth: Request check run before every panel route (the API's
            static-key auth). None leaves the routes open.
    """
    if not HAS_UI:
        log.warning("Jinja2 or Markdown not installed, web panel disabled")
        return

    from fastapi import Depends
    from fastapi.responses import HTMLResponse

    deps = [Depends(check_auth)] if check_auth is not None else []

    env = Environment(
        loader=FileSystemLoader(str(_TEMPLATES_DIR)),
        autoescape=True,
    )
    env.filters["markdown"] = render_markdown

    def _render(template: str, **ctx) -> HTMLResponse:
        ctx.setdefault("version", __version__)
        tmpl = env.get_template(template)
        return HTMLResponse(tmpl.render(**ctx))

    def _context_ctx(prompt: str | None = None) -> dict:
        return {
            "snapshot": assistant.context.snapshot,
            "description": assistant.context.describe(),
            "status": assistant.token_status(prompt),
        }

    # --- Full-page route ---

    @app.get("/ui", response_class=HTMLResponse, dependencies=deps)
    @app.get("/ui/", response_class=HTMLResponse, dependencies=deps)
    def ui_panel():
        active = assistant.context.active_note
        return _render(
            "panel.html",
            history=assistant.history,
            max_tokens=assistant.context.max_tokens,
            folders=assistant.list_folders(),
            selected_folder=assistant.context.folder,
            notes=assistant.vault.markdown_files(),
            active_note=active.path if active else "",
            prompt_files=assistant.prompt_files(),
            prompt_notice=assistant.prompt_files_notice(),
            selected_prompt=assistant.prompt_file,
            prompt=assistant.prompt,
            **_context_ctx(),
        )

    # --- HTMX partial routes ---

    @app.post("/ui/context", response_class=HTMLResponse, dependencies=deps)
    def ui_context(body: dict):
        prompt = body.get("prompt", "")
        assistant.prompt = prompt
        error = ""
        if "note" in body:
            assistant.set_active_note(body.get("note") or None)
        if "folder" in body:
            try:
                assistant.select_folder(body.get("folder") or "")
            except VaultPathError as e:
                error = str(e)
        return _render("_context.html", error=error, **_context_ctx(prompt))

    @app.post("/ui/prompt", response_class=HTMLResponse, dependencies=deps)
    def ui_prompt(body: dict):
        text = assistant.select_prompt_file(body.get("prompt_file") or "")
        return _render(
            "_prompt.html",
            prompt=text,
            status=assistant.token_status(text),
            with_tokens=True,
        )

    @app.post("/ui/tokens", response_class=HTMLResponse, dependencies=deps)
    def ui_tokens(body: dict):
        return _render("_tokens.html", status=assistant.token_status(body.get("prompt", "")))

    @app.post("/ui/ask", response_class=HTMLResponse, dependencies=deps)
    def ui_ask(body: dict):
        result = assistant.ask(body.get("prompt", ""))
        return _render("_entry.html", entry=result.entry, error=result.error)
