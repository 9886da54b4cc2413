"""Field mapping model and the editable mapping set."""
import logging
import threading
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Tuple

from fieldmap.schema.models import Field, FieldOrigin

logger = logging.getLogger(__name__)

MappingListener = Callable[[Tuple["Mapping", ...]], None]


def _first_present(data: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in data and data[key] is not None:
            return data[key]
    return None


@dataclass
class Mapping:
    """Represents a directed mapping from an API field to a database column."""

    id: str
    source_field: Field
    target_field: Field
    is_active: bool = True
    created_at: datetime = field(default_factory=datetime.now)
    updated_at: datetime = field(default_factory=datetime.now)

    @staticmethod
    def make_id(source_field: Field, target_field: Field) -> str:
        """Build the mapping id used by the editor."""
        return f"map-{source_field.id}-{target_field.id}"

    @classmethod
    def create(cls, source_field: Field, target_field: Field) -> "Mapping":
        """Create an active mapping between two fields."""
        now = datetime.now()
        return cls(
            id=cls.make_id(source_field, target_field),
            source_field=source_field,
            target_field=target_field,
            created_at=now,
            updated_at=now,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Mapping":
        """
        Build a mapping from a dictionary.

        Accepts both snake_case and the camelCase keys produced by the
        mapping editor (sourceField, targetField, isActive).
        """
        data = data or {}
        source = _first_present(data, "source_field", "sourceField", "source")
        target = _first_present(data, "target_field", "targetField", "target")

        source_field = source if isinstance(source, Field) else Field.from_dict(
            source if isinstance(source, dict) else {}, FieldOrigin.API
        )
        target_field = target if isinstance(target, Field) else Field.from_dict(
            target if isinstance(target, dict) else {}, FieldOrigin.DATABASE
        )

        is_active = _first_present(data, "is_active", "isActive")
        mapping_id = data.get("id") or cls.make_id(source_field, target_field)

        mapping = cls(
            id=str(mapping_id),
            source_field=source_field,
            target_field=target_field,
            is_active=True if is_active is None else bool(is_active),
        )

        for attr, keys in (("created_at", ("created_at", "createdAt")), ("updated_at", ("updated_at", "updatedAt"))):
            value = _first_present(data, *keys)
            if isinstance(value, datetime):
                setattr(mapping, attr, value)
            elif isinstance(value, str):
                try:
                    setattr(mapping, attr, datetime.fromisoformat(value.replace("Z", "+00:00")))
                except ValueError:
                    logger.warning(f"Invalid timestamp for {attr} in mapping {mapping_id}: {value}")

        return mapping

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "source_field": self.source_field.to_dict(),
            "target_field": self.target_field.to_dict(),
            "is_active": self.is_active,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class MappingSet:
    """
    Ordered set of mappings owned by the mapping editor.

    Listeners subscribed with subscribe() receive a snapshot of the
    mappings after every change; this is what drives live validation.
    """

    def __init__(self, mappings: Optional[List[Mapping]] = None):
        """Initialize the set with optional mappings."""
        self._mappings: List[Mapping] = list(mappings or [])
        self._listeners: List[MappingListener] = []
        self._lock = threading.RLock()

    def __len__(self) -> int:
        return len(self._mappings)

    def __iter__(self):
        return iter(self.snapshot())

    def snapshot(self) -> Tuple[Mapping, ...]:
        """Return an immutable view of the current mappings."""
        with self._lock:
            return tuple(self._mappings)

    def active(self) -> List[Mapping]:
        """Return active mappings only."""
        return [m for m in self.snapshot() if m.is_active]

    def get(self, mapping_id: str) -> Optional[Mapping]:
        """Return mapping by id."""
        for mapping in self.snapshot():
            if mapping.id == mapping_id:
                return mapping
        return None

    def create_mapping(self, source_field: Field, target_field: Field) -> Optional[Mapping]:
        """
        Connect two fields.

        Returns None without changing the set when either field is already
        connected by an existing mapping.
        """
        with self._lock:
            for existing in self._mappings:
                if (
                    existing.source_field.id == source_field.id
                    or existing.target_field.id == target_field.id
                ):
                    logger.info(
                        f"Skipping mapping {source_field.name} → {target_field.name}: "
                        f"already connected by {existing.id}"
                    )
                    return None

            mapping = Mapping.create(source_field, target_field)
            self._mappings.append(mapping)

        self._notify()
        return mapping

    def add(self, mapping: Mapping) -> None:
        """Append a mapping without any duplicate check."""
        with self._lock:
            self._mappings.append(mapping)
        self._notify()

    def replace_all(self, mappings: List[Mapping]) -> None:
        """Replace every mapping at once."""
        with self._lock:
            self._mappings = list(mappings)
        self._notify()

    def remove(self, mapping_id: str) -> bool:
        """Remove a mapping by id."""
        with self._lock:
            before = len(self._mappings)
            self._mappings = [m for m in self._mappings if m.id != mapping_id]
            removed = len(self._mappings) != before

        if removed:
            self._notify()
        return removed

    def clear(self) -> None:
        """Remove all mappings."""
        with self._lock:
            self._mappings = []
        self._notify()

    def duplicate_endpoints(self) -> Dict[str, List[str]]:
        """
        Report fields used by more than one active mapping.

        Uniqueness is advisory: the validation engine never rejects
        duplicates, this only lists them.

        Returns:
            {"source:<field id>" or "target:<field id>": [mapping ids]}
        """
        usage: Dict[str, List[str]] = {}
        for mapping in self.active():
            usage.setdefault(f"source:{mapping.source_field.id}", []).append(mapping.id)
            usage.setdefault(f"target:{mapping.target_field.id}", []).append(mapping.id)
        return {key: ids for key, ids in usage.items() if len(ids) > 1}

    def subscribe(self, listener: MappingListener) -> Callable[[], None]:
        """Register a change listener and return its unsubscribe function."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe() -> None:
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self) -> None:
        snapshot = self.snapshot()
        with self._lock:
            listeners = list(self._listeners)

        for listener in listeners:
            try:
                listener(snapshot)
            except Exception as e:
                logger.error(f"Mapping listener failed: {e}")
