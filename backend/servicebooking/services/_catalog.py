"""Helpers shared by the provider and service offering catalog services."""

from typing import Any, Dict, Iterable, List, Sequence, Set, Tuple, TypeVar

from ..core.exceptions import ValidationException

T = TypeVar("T")


def blank_to_none(changes: Dict[str, Any]) -> Dict[str, Any]:
    """Drop fields whose value is None or an empty string; they mean "keep current"."""
    return {key: value for key, value in changes.items() if value is not None and value != ""}


def resolve_requested_ids(
    requested: Sequence[int] | None, found: Iterable[T], field_name: str
) -> Tuple[Set[int], List[T]]:
    """
    Check that every requested id was found.

    Raises:
        ValidationException: The list is null, or some ids do not exist
    """
    if requested is None:
        raise ValidationException(
            f"{field_name} cannot be null",
            code="IDS_REQUIRED",
            details={"field": field_name},
        )
    wanted = set(requested)
    entities = list(found)
    missing = sorted(wanted - {getattr(entity, "id") for entity in entities})
    if missing:
        raise ValidationException(
            "One or more ids do not exist",
            code="UNKNOWN_IDS",
            details={"field": field_name, "unknown_ids": missing},
        )
    return wanted, entities


def replace_members(collection: List[T], wanted: Iterable[T]) -> Tuple[int, int]:
    """
    Make ``collection`` hold exactly ``wanted`` by symmetric difference.

    Only the members that actually change are touched, so untouched join rows
    are neither deleted nor re-inserted.

    Returns:
        (added, removed) counts
    """
    wanted_by_id = {getattr(entity, "id"): entity for entity in wanted}
    current_ids = {getattr(entity, "id") for entity in collection}

    to_remove = [entity for entity in collection if getattr(entity, "id") not in wanted_by_id]
    to_add = [entity for entity_id, entity in wanted_by_id.items() if entity_id not in current_ids]

    for entity in to_remove:
        collection.remove(entity)
    collection.extend(to_add)
    return len(to_add), len(to_remove)
