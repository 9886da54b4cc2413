"""Models for API fields and database columns taking part in a mapping."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Iterable, Optional, Tuple

logger = logging.getLogger(__name__)


class FieldOrigin(str, Enum):
    """Where a field was extracted from."""

    API = "api"
    DATABASE = "database"

    @classmethod
    def parse(cls, value: Any, default: "FieldOrigin") -> "FieldOrigin":
        """Parse an origin token, falling back to *default*."""
        if isinstance(value, FieldOrigin):
            return value
        token = str(value or "").strip().lower()
        if token in ("db", "database"):
            return cls.DATABASE
        if token == "api":
            return cls.API
        return default


class ConstraintKind(str, Enum):
    """Column constraints the validation rules understand."""

    PRIMARY_KEY = "PRIMARY KEY"
    UNIQUE = "UNIQUE"
    NOT_NULL = "NOT NULL"

    @classmethod
    def parse(cls, token: Any) -> Optional["ConstraintKind"]:
        """
        Parse a constraint token.

        Accepts the literal tokens ("PRIMARY KEY") as well as common
        spellings ("primary_key", "Primary  Key", "PK").
        """
        if isinstance(token, ConstraintKind):
            return token
        if token is None:
            return None

        normalized = " ".join(str(token).replace("_", " ").upper().split())
        if normalized == "PK":
            return cls.PRIMARY_KEY
        for kind in cls:
            if kind.value == normalized:
                return kind
        return None


def parse_constraints(tokens: Optional[Iterable[Any]]) -> Tuple[ConstraintKind, ...]:
    """Parse constraint tokens into an ordered, de-duplicated tuple."""
    if tokens is None:
        return ()
    if isinstance(tokens, (str, ConstraintKind)):
        tokens = [tokens]

    kinds = []
    try:
        iterator = iter(tokens)
    except TypeError:
        logger.warning(f"Ignoring non-iterable constraints: {tokens!r}")
        return ()

    for token in iterator:
        kind = ConstraintKind.parse(token)
        if kind is None:
            logger.warning(f"Unknown constraint ignored: {token!r}")
            continue
        if kind not in kinds:
            kinds.append(kind)
    return tuple(kinds)


@dataclass(frozen=True)
class Field:
    """A source (API) field or target (database) column."""

    id: str
    name: str
    type: str
    nullable: bool = False
    constraints: Tuple[ConstraintKind, ...] = ()
    origin: FieldOrigin = FieldOrigin.API
    schema: Optional[str] = None
    table: Optional[str] = None
    path: Optional[str] = None  # JSONPath for API fields, e.g. "$.user.email"
    sample: Any = None  # Concrete sample value, when the extractor provides one

    def has_constraint(self, kind: ConstraintKind) -> bool:
        """Check whether the field carries *kind*."""
        return kind in self.constraints

    @property
    def qualified_name(self) -> str:
        """Return table.column for database fields, the name otherwise."""
        if self.table:
            return f"{self.table}.{self.name}"
        return self.name

    @classmethod
    def from_dict(
        cls,
        data: Dict[str, Any],
        origin: FieldOrigin = FieldOrigin.API,
    ) -> "Field":
        """
        Build a field from a dictionary.

        Missing keys never raise: constraints default to empty, nullability
        is only True when explicitly True, name/type default to "".
        """
        data = data or {}
        name = data.get("name")
        field_type = data.get("type")
        field_id = data.get("id") or name or ""

        return cls(
            id=str(field_id),
            name="" if name is None else str(name),
            type="" if field_type is None else str(field_type),
            nullable=data.get("nullable") is True,
            constraints=parse_constraints(data.get("constraints")),
            origin=FieldOrigin.parse(data.get("origin") or data.get("source"), origin),
            schema=data.get("schema"),
            table=data.get("table"),
            path=data.get("path"),
            sample=data.get("sample"),
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "nullable": self.nullable,
            "constraints": [c.value for c in self.constraints],
            "origin": self.origin.value,
            "schema": self.schema,
            "table": self.table,
            "path": self.path,
            "sample": self.sample,
        }
