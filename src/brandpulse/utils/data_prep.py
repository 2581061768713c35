"""Data preparation for export."""

import datetime
import json
from dataclasses import asdict, is_dataclass
from enum import Enum
from typing import Any, Dict


def to_jsonable(obj: Any) -> Any:
    """Convert records, enums and datetimes into JSON-compatible values."""
    if hasattr(obj, "to_dict"):
        return to_jsonable(obj.to_dict())
    if isinstance(obj, Enum):
        return obj.value
    if isinstance(obj, (datetime.datetime, datetime.date)):
        return obj.isoformat()
    if is_dataclass(obj) and not isinstance(obj, type):
        return to_jsonable(asdict(obj))
    if isinstance(obj, dict):
        return {str(k): to_jsonable(v) for k, v in obj.items()}
    if isinstance(obj, (list, tuple, set, frozenset)):
        return [to_jsonable(v) for v in obj]
    return obj


def export_to_json(data: Any, filename: str) -> Dict[str, Any]:
    """Export data to JSON file, stamping metadata.export_timestamp."""
    payload = to_jsonable(data)
    if not isinstance(payload, dict):
        payload = {"data": payload}
    metadata = payload.get("metadata")
    if not isinstance(metadata, dict):
        metadata = payload["metadata"] = {}

    # Add timestamp
    metadata["export_timestamp"] = datetime.datetime.now(datetime.timezone.utc).isoformat()

    with open(filename, "w", encoding="utf-8") as f:
        json.dump(payload, f, indent=2, ensure_ascii=False)
    return payload
