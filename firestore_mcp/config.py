"""
Environment-driven settings for the Firestore MCP server.

GOOGLE_CLOUD_PROJECTS: comma-separated project ids, e.g. "proj-a,proj-b".
GOOGLE_APPLICATION_CREDENTIALS: optional single service account file used for
every project instead of keys/<project_id>.json.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_PROJECT_ID = "google-project-id1"
DEFAULT_KEYS_DIR = Path(__file__).resolve().parent.parent / "keys"


@dataclass(frozen=True)
class Settings:
    project_ids: tuple[str, ...]
    projects_env: Optional[str] = None
    credentials_path: Optional[str] = None
    keys_dir: Path = DEFAULT_KEYS_DIR
    transport: str = "stdio"
    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "INFO"

    def credentials_for(self, project_id: str) -> Path:
        """Credential file for a project: the override if set, else keys/<id>.json."""
        if self.credentials_path:
            return Path(self.credentials_path)
        return self.keys_dir / f"{project_id}.json"


def parse_project_ids(raw: Optional[str]) -> tuple[str, ...]:
    if not raw:
        return (DEFAULT_PROJECT_ID,)
    ids = tuple(p.strip() for p in raw.split(",") if p.strip())
    return ids or (DEFAULT_PROJECT_ID,)


def load_settings(environ: Mapping[str, str] = os.environ) -> Settings:
    raw = environ.get("GOOGLE_CLOUD_PROJECTS")
    keys_dir = environ.get("FIRESTORE_MCP_KEYS_DIR")
    return Settings(
        project_ids=parse_project_ids(raw),
        projects_env=raw or None,
        credentials_path=environ.get("GOOGLE_APPLICATION_CREDENTIALS") or None,
        keys_dir=Path(keys_dir) if keys_dir else DEFAULT_KEYS_DIR,
        transport=environ.get("FIRESTORE_MCP_TRANSPORT", "stdio").lower(),
        host=environ.get("FIRESTORE_MCP_HOST", "127.0.0.1"),
        port=int(environ.get("FIRESTORE_MCP_PORT", "8000")),
        log_level=environ.get("FIRESTORE_MCP_LOG_LEVEL", "INFO").upper(),
    )
