"""Infrastructure: resolve credentials and scope into an InvocationContext.

Sources, highest precedence first:

* command-line overrides (``--token``, ``--team``)
* environment (``NOW_TOKEN``, ``NOW_API_URL``, ``NOW_CONFIG_DIR``)
* the local ``now.json`` (``scope`` selects a team)
* the global config directory (``auth.json`` and ``config.json``)

Rules
-----
* Read-only — nothing is ever written back.
* No user-facing output; failures raise :class:`ConfigError`.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path
from typing import Any

from now_certs.core.models import InvocationContext, Team, User
from now_certs.exceptions import ConfigError
from now_certs.infra.now_client import DEFAULT_API_URL

logger = logging.getLogger(__name__)

AUTH_FILE = "auth.json"
CONFIG_FILE = "config.json"
LOCAL_CONFIG_FILE = "now.json"
CREDENTIALS_PROVIDER = "sh"


def default_global_config_dir() -> Path:
    """Return ``$NOW_CONFIG_DIR`` or ``~/.now``."""
    env_dir = os.environ.get("NOW_CONFIG_DIR")
    if env_dir:
        return Path(env_dir).expanduser()
    return Path.home() / ".now"


def _read_json(path: Path, *, required: bool) -> dict[str, Any]:
    """Load a JSON object from *path*; missing optional files yield ``{}``."""
    if not path.is_file():
        if required:
            raise ConfigError(f"Config file not found: {path}")
        return {}
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as exc:
        raise ConfigError(f"Could not read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a JSON object.")
    logger.debug("loaded config file %s", path)
    return data


def _stored_token(auth: dict[str, Any]) -> str | None:
    credentials = auth.get("credentials")
    if not isinstance(credentials, list):
        return None
    for item in credentials:
        if isinstance(item, dict) and item.get("provider") == CREDENTIALS_PROVIDER:
            token = item.get("token")
            if token:
                return str(token)
    return None


def _stored_team(sh: dict[str, Any]) -> Team | None:
    raw = sh.get("currentTeam")
    if not isinstance(raw, dict) or not raw.get("slug"):
        return None
    team_id = raw.get("id")
    return Team(slug=str(raw["slug"]), id=str(team_id) if team_id else None)


def _stored_user(sh: dict[str, Any]) -> User:
    raw = sh.get("user")
    if not isinstance(raw, dict):
        return User()
    username = raw.get("username")
    email = raw.get("email")
    return User(
        username=str(username) if username else None,
        email=str(email) if email else None,
    )


def load_invocation_context(
    *,
    token: str | None = None,
    team: str | None = None,
    local_config: str | None = None,
    global_config: str | None = None,
) -> InvocationContext:
    """Build the :class:`InvocationContext` for one CLI run.

    Raises
    ------
    ConfigError
        If no login token can be found, an explicit local config file
        is missing, or any config file is not a readable JSON object.
    """
    config_dir = (
        Path(global_config).expanduser() if global_config else default_global_config_dir()
    )
    if global_config and not config_dir.is_dir():
        raise ConfigError(f"Global config directory not found: {config_dir}")

    auth = _read_json(config_dir / AUTH_FILE, required=False)
    config = _read_json(config_dir / CONFIG_FILE, required=False)

    if local_config:
        local = _read_json(Path(local_config).resolve(), required=True)
    else:
        local = _read_json(Path.cwd() / LOCAL_CONFIG_FILE, required=False)

    sh_raw = config.get(CREDENTIALS_PROVIDER)
    sh: dict[str, Any] = sh_raw if isinstance(sh_raw, dict) else {}

    resolved_token = token or os.environ.get("NOW_TOKEN") or _stored_token(auth)
    if not resolved_token:
        raise ConfigError(
            "No login token found.",
            hint="Run `now login`, or pass one with --token.",
        )

    resolved_team: Team | None
    if team:
        resolved_team = Team(slug=team)
    elif local.get("scope"):
        resolved_team = Team(slug=str(local["scope"]))
    else:
        resolved_team = _stored_team(sh)

    api_url = os.environ.get("NOW_API_URL") or config.get("api") or DEFAULT_API_URL

    return InvocationContext(
        token=resolved_token,
        api_url=str(api_url),
        user=_stored_user(sh),
        team=resolved_team,
    )
