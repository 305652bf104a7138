"""
Per-project Firestore clients.

One firebase_admin app (named after the project id) and one async Firestore
client per configured project, built once at startup. The registry is
read-only afterwards and is handed to the MCP server explicitly.
"""

import json
import logging
from types import MappingProxyType
from typing import Any, Callable, Mapping, Optional

import firebase_admin
from firebase_admin import credentials, firestore_async
from google.cloud.firestore import AsyncClient

from .config import Settings

logger = logging.getLogger(__name__)


class RegistryError(RuntimeError):
    """No Firestore project could be initialized."""


class ProjectNotFoundError(LookupError):
    def __init__(self, project_id: str):
        super().__init__(f"Project '{project_id}' not found or not initialized")
        self.project_id = project_id


class ProjectRegistry:
    def __init__(self, clients: Mapping[str, Any], raw_config: Optional[str] = None):
        if not clients:
            raise RegistryError("Failed to initialize any Firestore projects")
        self._clients = MappingProxyType(dict(clients))
        self._default = next(iter(self._clients))
        self._raw_config = raw_config

    @property
    def default_project(self) -> str:
        return self._default

    @property
    def project_ids(self) -> list[str]:
        return list(self._clients)

    @property
    def raw_config(self) -> Optional[str]:
        return self._raw_config

    def project_id(self, project: Optional[str] = None) -> str:
        project_id = project or self._default
        if project_id not in self._clients:
            raise ProjectNotFoundError(project_id)
        return project_id

    def resolve(self, project: Optional[str] = None) -> AsyncClient:
        return self._clients[self.project_id(project)]

    def __contains__(self, project_id: object) -> bool:
        return project_id in self._clients

    def __len__(self) -> int:
        return len(self._clients)


def connect_project(project_id: str, service_account: dict) -> AsyncClient:
    cred = credentials.Certificate(service_account)
    app = firebase_admin.initialize_app(cred, name=project_id)
    return firestore_async.client(app)


def load_registry(
    settings: Settings,
    connect: Callable[[str, dict], Any] = connect_project,
) -> ProjectRegistry:
    """Initialize every configured project; missing or broken credentials skip that project."""
    clients: dict[str, Any] = {}
    for project_id in settings.project_ids:
        key_path = settings.credentials_for(project_id)
        if not key_path.exists():
            logger.warning(f"No credentials file found for project {project_id} at {key_path}")
            continue
        try:
            with open(key_path, encoding="utf-8") as f:
                service_account = json.load(f)
            clients[project_id] = connect(project_id, service_account)
        except Exception as e:
            logger.error(f"Error initializing Firestore for project {project_id}: {e}")
            continue
        logger.info(f"Firestore initialized for project: {project_id}")

    if not clients:
        raise RegistryError("Failed to initialize any Firestore projects")
    return ProjectRegistry(clients, raw_config=settings.projects_env)
