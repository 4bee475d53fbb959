"""CLI command for the web panel: ala ui."""

from __future__ import annotations

import logging
import threading
import webbrowser
from pathlib import Path

import click

from lifeassist.core.config import assistant_dir, configure_logging, load_vault_config, resolve_vault


@click.command("ui")
@click.option("--port", "-p", default=None, type=int, help="Port (default: from config).")
@click.option("--host", default=None, help="Host (default: 127.0.0.1).")
@click.option(
    "--vault",
    type=click.Path(path_type=Path),
    default=None,
    help="Override LA_VAULT path.",
)
@click.option("--no-open", is_flag=True, default=False, help="Don't open browser.")
def ui_cmd(port: int | None, host: str | None, vault: Path | None, no_open: bool) -> None:
    """Start the assistant web panel (HTTP API + browser interface)."""
    try:
        import uvicorn
    except ImportError:
        click.echo(
            "FastAPI and uvicorn are required. "
            "Install with: pip install lifeassist[ui]"
        )
        return

    vault_path = (vault or resolve_vault()).resolve()
    config = load_vault_config(vault_path)
    ui_config = config.get("ui", {})
    api_config = config.get("api", {})

    configure_logging(
        config.get("logging", {}).get("level", "warning"),
        log_file=assistant_dir(vault_path) / "assistant.log",
    )
    log = logging.getLogger("lifeassist.ui")
    log.info("Web panel starting (vault=%s)", vault_path)

    final_host = host or ui_config.get("host", "127.0.0.1")
    final_port = port or ui_config.get("port", 8421)
    open_browser = not no_open and ui_config.get("open_browser", True)

    from lifeassist.api.server import create_app

    app = create_app(
        vault=vault_path,
        api_key=api_config.get("api_key"),
        cors_origins=api_config.get("cors_origins", []),
        enable_ui=True,
    )

    url = f"http://{final_host}:{final_port}/ui"
    click.echo(f"Starting AI Life Assistant panel at {url}")

    if open_browser:
        def _open_browser():
            import time
            time.sleep(1.2)
            webbrowser.open(url)

        t = threading.Thread(target=_open_browser, daemon=True)
        t.start()

    uvicorn.run(app, host=final_host, port=final_port, log_level="info")
