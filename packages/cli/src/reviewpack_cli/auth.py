"""GitHub token lookup for the pull request step.

The token loaded into ReviewPackConfig (from GITHUB_TOKEN) wins. Without one,
the session stored by `gh auth login` is reused.
"""

from __future__ import annotations

import logging
import subprocess

logger = logging.getLogger(__name__)

GH_TOKEN_COMMAND = ["gh", "auth", "token"]


def resolve_github_token(configured: str | None = None) -> str | None:
    """Return a GitHub token, or None when neither source has one."""
    if configured:
        return configured
    return _gh_session_token()


def _gh_session_token() -> str | None:
    try:
        result = subprocess.run(GH_TOKEN_COMMAND, capture_output=True, text=True, timeout=5, check=False)
    except (FileNotFoundError, subprocess.TimeoutExpired) as e:
        logger.debug("No gh CLI session available: %s", e)
        return None

    token = result.stdout.strip() if result.returncode == 0 else ""
    if not token:
        logger.debug("gh CLI is not logged in.")
        return None
    logger.debug("Resolved GitHub token via gh CLI session.")
    return token
