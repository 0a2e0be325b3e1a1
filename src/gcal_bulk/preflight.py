"""
Preflight checks run before authenticating to catch common misconfigurations early.
"""

import json
import logging
import os

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from gcal_bulk.models import BulkConfig

logger = logging.getLogger(__name__)


def run_preflight_checks(cfg: BulkConfig, console: Console) -> bool:
    """Return True if the run may proceed; print issues and return False otherwise."""
    issues: list[tuple[str, str, str]] = []  # (label, detail, hint)

    # 1. Some way to authorize: cached token, inline client, or secrets file
    has_inline_client = bool(cfg.client_id and cfg.client_secret)
    if not cfg.token_file.exists() and not has_inline_client and not cfg.client_secrets.exists():
        logger.error("No OAuth client credentials found")
        issues.append(
            (
                "OAuth client",
                f"{cfg.client_secrets} not found and no client_id/client_secret set",
                "Download an OAuth 'Desktop app' client JSON from the Google Cloud console",
            )
        )

    # 2. Cached token parses
    if cfg.token_file.exists():
        try:
            json.loads(cfg.token_file.read_text(encoding="utf-8"))
        except (OSError, ValueError) as e:
            logger.error("Token file unreadable (%s): %s", cfg.token_file, e)
            issues.append(
                (
                    "OAuth token",
                    f"{cfg.token_file}: {e}",
                    "Delete the token file to re-authorize",
                )
            )

    # 3. Token directory writable
    token_dir = cfg.token_file.parent
    try:
        token_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        logger.error("Cannot create token directory %s: %s", token_dir, e)
        issues.append(("Token directory", f"{token_dir}: {e}", f"Check permissions on {token_dir}"))
    else:
        if not os.access(token_dir, os.W_OK):
            logger.error("Token directory not writable: %s", token_dir)
            issues.append(
                (
                    "Token directory",
                    f"{token_dir} is not writable",
                    f"Check permissions on {token_dir}",
                )
            )

    if issues:
        _print_issues(issues, console)
        return False

    return True


def _print_issues(issues: list[tuple[str, str, str]], console: Console) -> None:
    body = Text()
    for i, (label, detail, hint) in enumerate(issues):
        if i:
            body.append("\n")
        body.append(f"  ✗  {label}: ", style="bold red")
        body.append(detail, style="bold red")
        body.append(f"\n       → {hint}", style="yellow")

    console.print(Panel(body, title="[bold red]Preflight checks failed[/bold red]"))
