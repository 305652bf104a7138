"""
prompts/list support: documents of the default project's "prompts" collection
reshaped into prompt records. Never raises; failures log and yield [].
"""

import json
import logging
from typing import Any

from mcp import types

from .registry import ProjectRegistry
from .timestamps import normalize, to_json

logger = logging.getLogger(__name__)

PROMPTS_COLLECTION = "prompts"


def _text_field(value: Any, fallback: str) -> str:
    if value is None or value == "":
        return fallback
    return value if isinstance(value, str) else to_json(value)


def prompt_record(doc_id: str, data: dict[str, Any]) -> dict[str, Any]:
    extra = data.get("metadata")
    metadata = {
        "createdAt": data.get("createdAt"),
        "updatedAt": data.get("updatedAt"),
        "tags": data.get("tags") or [],
        **(extra if isinstance(extra, dict) else {}),
    }
    return {
        "id": doc_id,
        "name": _text_field(data.get("name"), doc_id),
        "description": _text_field(data.get("description"), ""),
        "text": _text_field(data.get("text") or data.get("content"), ""),
        # Timestamps and other Firestore types leave in their JSON wire shape
        "metadata": json.loads(to_json(metadata)),
    }


async def load_prompts(registry: ProjectRegistry) -> list[types.Prompt]:
    try:
        db = registry.resolve()
        snapshots = await db.collection(PROMPTS_COLLECTION).get()
    except Exception as e:
        logger.error(f"Error in prompts/list handler: {e}")
        return []

    prompts = []
    for snapshot in snapshots:
        try:
            record = prompt_record(snapshot.id, normalize(snapshot.to_dict()) or {})
            prompts.append(types.Prompt.model_validate(record))
        except Exception as e:
            logger.warning(f"Skipping prompt '{snapshot.id}': {e}")
    return prompts
