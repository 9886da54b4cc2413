"""Shared fixtures for field mapping tests."""
import pytest

from config import ValidationConfig
from fieldmap.mapper.mapping import Mapping
from fieldmap.schema.models import ConstraintKind, Field, FieldOrigin


def api_field(name, field_type, nullable=False, sample=None, field_id=None):
    """Build an API source field."""
    return Field(
        id=field_id or f"api-{name}",
        name=name,
        type=field_type,
        nullable=nullable,
        origin=FieldOrigin.API,
        path=f"$.{name}",
        sample=sample,
    )


def db_column(name, column_type, *constraints, table="users", nullable=None, field_id=None):
    """Build a database target column."""
    kinds = tuple(ConstraintKind.parse(c) for c in constraints)
    if nullable is None:
        nullable = ConstraintKind.NOT_NULL not in kinds and ConstraintKind.PRIMARY_KEY not in kinds
    return Field(
        id=field_id or f"{table}.{name}",
        name=name,
        type=column_type,
        nullable=nullable,
        constraints=kinds,
        origin=FieldOrigin.DATABASE,
        table=table,
    )


def make_mapping(source, target):
    """Create a mapping between two fields."""
    return Mapping.create(source, target)


@pytest.fixture
def config():
    """Default validation config."""
    return ValidationConfig()


@pytest.fixture
def email_mapping():
    """email string → varchar(255) UNIQUE (valid with an informational warning)."""
    return make_mapping(
        api_field("email", "string"),
        db_column("email", "varchar(255)", "UNIQUE"),
    )


@pytest.fixture
def quantity_mapping():
    """Nullable number → tinyint NOT NULL (invalid)."""
    return make_mapping(
        api_field("quantity", "number", nullable=True),
        db_column("quantity", "tinyint", "NOT NULL", table="orders"),
    )


@pytest.fixture
def key_mapping():
    """Nullable string → int PRIMARY KEY (invalid)."""
    return make_mapping(
        api_field("id", "string", nullable=True),
        db_column("id", "int", "PRIMARY KEY"),
    )


@pytest.fixture
def clean_mapping():
    """name string → varchar(255) without constraints (clean)."""
    return make_mapping(
        api_field("name", "string"),
        db_column("name", "varchar(255)"),
    )


@pytest.fixture
def callback_mapping():
    """function → varchar(255) (non-serializable)."""
    return make_mapping(
        api_field("callback", "function"),
        db_column("callback", "varchar(255)"),
    )
