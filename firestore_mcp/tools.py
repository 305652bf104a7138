"""
Firestore tool table and dispatcher.

Each tool is a ToolSpec entry: description, JSON input schema (what tools/list
advertises), pydantic argument model, and async handler. dispatch() validates
arguments, runs the handler against the resolved project, and always returns a
JSON-able value; failures come back as {"error": ...} payloads.
"""

import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable

from pydantic import BaseModel, ValidationError

from .query import OPERATORS, build_query
from .registry import ProjectNotFoundError, ProjectRegistry
from .schemas import (
    CreateDocumentArgs,
    DocumentArgs,
    EmptyArgs,
    ListPromptsArgs,
    ProjectArgs,
    QueryDocumentsArgs,
    UpdateDocumentArgs,
    format_errors,
)
from .timestamps import normalize

logger = logging.getLogger(__name__)

NOT_FOUND = {"error": "Document not found"}

Handler = Callable[[ProjectRegistry, Any], Awaitable[Any]]


@dataclass(frozen=True)
class ToolSpec:
    description: str
    input_schema: dict
    args_model: type[BaseModel]
    handler: Handler


def _schema(props=None, req=None) -> dict:
    schema = {"type": "object", "properties": props or {}}
    if req:
        schema["required"] = list(req)
    return schema


# Reusable schema fragments
_P = {"project": {"type": "string", "description": "The Google project ID to use (optional, defaults to the first project in GOOGLE_CLOUD_PROJECTS)"}}
_C = {"collection": {"type": "string", "description": "The Firestore collection name"}}
_LIMIT = {"type": "integer", "description": "The maximum number of documents to return", "minimum": 1}
_FILTER = {
    "type": "object",
    "properties": {
        "field": {"type": "string", "description": "The document field to filter on"},
        "operator": {"type": "string", "description": "The comparison operator", "enum": list(OPERATORS)},
        "value": {"description": "The value to compare against"},
    },
    "required": ["field", "operator", "value"],
}
_ORDER = {
    "type": "object",
    "properties": {
        "field": {"type": "string", "description": "The document field to order by"},
        "direction": {"type": "string", "description": "The sort direction", "enum": ["asc", "desc"], "default": "asc"},
    },
    "required": ["field"],
}


def _with_id(doc_id: str, data: dict | None) -> dict:
    """Document payload: the document id first, then its fields."""
    fields = {k: v for k, v in (data or {}).items() if k != "id"}
    return {"id": doc_id, **fields}


def _snapshot(snapshot) -> dict:
    return _with_id(snapshot.id, normalize(snapshot.to_dict()))


# ── Documents ─────────────────────────────────────────────────────

async def get_document(registry: ProjectRegistry, args: DocumentArgs) -> Any:
    db = registry.resolve(args.project)
    snapshot = await db.collection(args.collection).document(args.id).get()
    if not snapshot.exists:
        return NOT_FOUND
    return _snapshot(snapshot)


async def create_document(registry: ProjectRegistry, args: CreateDocumentArgs) -> Any:
    db = registry.resolve(args.project)
    data = normalize(args.data)
    collection = db.collection(args.collection)
    if args.id:
        # Overwrites any existing document with this id
        await collection.document(args.id).set(data)
        doc_id = args.id
    else:
        _, doc_ref = await collection.add(data)
        doc_id = doc_ref.id
    return _with_id(doc_id, data)


async def update_document(registry: ProjectRegistry, args: UpdateDocumentArgs) -> Any:
    db = registry.resolve(args.project)
    doc_ref = db.collection(args.collection).document(args.id)
    snapshot = await doc_ref.get()
    if not snapshot.exists:
        return NOT_FOUND
    await doc_ref.set(normalize(args.data), merge=args.merge)
    return _snapshot(await doc_ref.get())


async def delete_document(registry: ProjectRegistry, args: DocumentArgs) -> Any:
    project_id = registry.project_id(args.project)
    db = registry.resolve(project_id)
    doc_ref = db.collection(args.collection).document(args.id)
    snapshot = await doc_ref.get()
    if not snapshot.exists:
        return NOT_FOUND
    await doc_ref.delete()
    return {
        "success": True,
        "message": f"Document {args.id} deleted from {args.collection} in project {project_id}",
    }


async def query_documents(registry: ProjectRegistry, args: QueryDocumentsArgs) -> Any:
    db = registry.resolve(args.project)
    query = build_query(
        db.collection(args.collection),
        filters=args.filters or (),
        order_by=args.order_by or (),
        limit=args.limit,
    )
    snapshots = await query.get()
    return [_snapshot(s) for s in snapshots]


# ── Collections / projects ────────────────────────────────────────

async def list_collections(registry: ProjectRegistry, args: ProjectArgs) -> Any:
    db = registry.resolve(args.project)
    return [collection.id async for collection in db.collections()]


async def list_projects(registry: ProjectRegistry, args: EmptyArgs) -> Any:
    return {
        "projects": registry.project_ids,
        "defaultProject": registry.default_project,
        "currentEnv": registry.raw_config or "Not set",
    }


# ── Prompts ───────────────────────────────────────────────────────

async def list_prompts(registry: ProjectRegistry, args: ListPromptsArgs) -> Any:
    db = registry.resolve(args.project)
    query = db.collection(args.collection)
    if args.limit:
        query = query.limit(args.limit)
    snapshots = await query.get()
    if not snapshots:
        return {"message": f"No prompts found in collection '{args.collection}'", "prompts": []}
    prompts = [_snapshot(s) for s in snapshots]
    return {"message": f"Found {len(prompts)} prompts in collection '{args.collection}'", "prompts": prompts}


TOOLS: dict[str, ToolSpec] = {
    "getDocument": ToolSpec(
        "Get a single document from Firestore",
        _schema({**_C, "id": {"type": "string", "description": "The document ID to retrieve"}, **_P}, ["collection", "id"]),
        DocumentArgs, get_document,
    ),
    "createDocument": ToolSpec(
        "Create a new document in Firestore",
        _schema({
            **_C,
            "data": {"type": "object", "description": "The document data to create"},
            "id": {"type": "string", "description": "Optional document ID (will be auto-generated if not provided)"},
            **_P,
        }, ["collection", "data"]),
        CreateDocumentArgs, create_document,
    ),
    "updateDocument": ToolSpec(
        "Update an existing document in Firestore",
        _schema({
            **_C,
            "id": {"type": "string", "description": "The document ID to update"},
            "data": {"type": "object", "description": "The document data to update"},
            "merge": {"type": "boolean", "description": "Whether to merge the data with the existing document or overwrite it", "default": True},
            **_P,
        }, ["collection", "id", "data"]),
        UpdateDocumentArgs, update_document,
    ),
    "deleteDocument": ToolSpec(
        "Delete a document from Firestore",
        _schema({**_C, "id": {"type": "string", "description": "The document ID to delete"}, **_P}, ["collection", "id"]),
        DocumentArgs, delete_document,
    ),
    "queryDocuments": ToolSpec(
        "Query documents from Firestore with filters, ordering, and limits",
        _schema({
            **_C,
            "filters": {"type": "array", "description": "An array of filter conditions", "items": _FILTER},
            "orderBy": {"type": "array", "description": "An array of ordering directives", "items": _ORDER},
            "limit": _LIMIT,
            **_P,
        }, ["collection"]),
        QueryDocumentsArgs, query_documents,
    ),
    "listCollections": ToolSpec(
        "List all collections in the Firestore database",
        _schema({**_P}),
        ProjectArgs, list_collections,
    ),
    "listProjects": ToolSpec(
        "List all available Google project IDs that have been initialized",
        _schema(),
        EmptyArgs, list_projects,
    ),
    "listPrompts": ToolSpec(
        "List all prompts stored in Firestore",
        _schema({
            "collection": {"type": "string", "description": "The Firestore collection containing prompts (defaults to 'prompts')", "default": "prompts"},
            **_P,
            "limit": {**_LIMIT, "description": "The maximum number of prompts to return"},
        }),
        ListPromptsArgs, list_prompts,
    ),
}


async def dispatch(registry: ProjectRegistry, name: str, arguments: dict[str, Any] | None) -> Any:
    tool = TOOLS.get(name)
    if tool is None:
        return {"error": f"Unknown tool: {name}"}
    try:
        args = tool.args_model.model_validate(arguments or {})
    except ValidationError as e:
        return {"error": "Invalid arguments", "details": format_errors(e)}
    try:
        return await tool.handler(registry, args)
    except ProjectNotFoundError as e:
        return {"error": str(e)}
    except Exception as e:
        logger.error(f"Firestore tool '{name}' failed: {e}")
        return {"error": "Internal server error", "message": str(e)}
