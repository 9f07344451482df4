"""
Tag codec for gallery items.
Tags are stored as one JSON string per row; these two functions are the only
place that format is produced or read.
"""
import json
import logging
from typing import List, Optional, Sequence

logger = logging.getLogger(__name__)


def serialize_tags(tags: Optional[Sequence[str]]) -> Optional[str]:
    """
    Encode an ordered tag sequence for storage.

    Args:
        tags: Tag strings in display order, or None for "no tags"

    Returns:
        JSON array string, or None when tags is None
    """
    if tags is None:
        return None
    return json.dumps(list(tags), ensure_ascii=False)


def deserialize_tags(raw) -> List[str]:
    """
    Decode a stored tag value back into an ordered list.
    Already-decoded lists pass through; empty or malformed values become [].
    """
    if raw is None or raw == "":
        return []
    if isinstance(raw, (list, tuple)):
        return [str(tag) for tag in raw]

    try:
        decoded = json.loads(raw)
    except (TypeError, ValueError):
        logger.warning(f"Ignoring malformed tags value: {raw!r}")
        return []

    if not isinstance(decoded, list):
        logger.warning(f"Ignoring non-list tags value: {raw!r}")
        return []
    return [str(tag) for tag in decoded]
