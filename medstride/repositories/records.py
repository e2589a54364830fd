"""Loading of stored JSON record lists that may hold unreadable entries."""

import logging
from typing import Any, TypeVar

from pydantic import BaseModel, ValidationError

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


def record_id(item: Any) -> Any:
    return item.get("id") if isinstance(item, dict) else None


def load_records(raw: Any, model: type[ModelT], key: str) -> tuple[list[ModelT], list[Any]]:
    """Split a stored list into parsed models and the raw items that failed validation.

    Unreadable items are returned untouched so a later write can put them back.
    """
    if raw is None:
        return [], []
    if not isinstance(raw, list):
        logger.warning("Ignoring %s: expected a list, got %s", key, type(raw).__name__)
        return [], []

    loaded: list[ModelT] = []
    unreadable: list[Any] = []
    for item in raw:
        try:
            loaded.append(model.model_validate(item))
        except ValidationError as e:
            logger.warning("Skipping unreadable %s record %s: %s", key, record_id(item), e.error_count())
            unreadable.append(item)
    return loaded, unreadable


def merge_unreadable(records: list[dict], unreadable: list[Any]) -> list[Any]:
    """Append unreadable items whose id is not among the records being written."""
    written_ids = {record_id(r) for r in records}
    kept = [item for item in unreadable if record_id(item) is None or record_id(item) not in written_ids]
    if kept:
        logger.info("Keeping %d unreadable record(s) on write", len(kept))
    return records + kept
