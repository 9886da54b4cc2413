"""Reads database columns from CREATE TABLE scripts."""
import dataclasses
import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Tuple

import sqlparse

from fieldmap.parser.dialect_detector import SqlDialectDetector
from fieldmap.schema.models import ConstraintKind, Field, FieldOrigin

logger = logging.getLogger(__name__)

_IDENT = r'[`"\[]?(\w+)[`"\]]?'
_TABLE_HEADER = re.compile(
    rf"CREATE\s+TABLE\s+(?:IF\s+NOT\s+EXISTS\s+)?(?:{_IDENT}\s*\.\s*)?{_IDENT}\s*\(",
    re.IGNORECASE,
)
_COLUMN = re.compile(
    rf"{_IDENT}\s+"
    r"([a-z_]\w*(?:\s+(?:varying|precision|without\s+time\s+zone|with\s+time\s+zone))?"
    r"(?:\s*\([^)]*\))?)\s*(.*)",
    re.IGNORECASE | re.DOTALL,
)
_TABLE_CONSTRAINT = re.compile(
    r"^(?:PRIMARY\s+KEY|FOREIGN\s+KEY|UNIQUE|CHECK|CONSTRAINT|KEY|INDEX)\b",
    re.IGNORECASE,
)


class SqlParser:
    """
    Offline DDL reader.

    Turns CREATE TABLE statements into DATABASE-origin Fields with the raw
    column type (lower-cased, size kept), nullability and constraints.
    """

    def __init__(self, dialect: Optional[str] = None):
        """Initialize parser with optional dialect."""
        self.dialect = dialect

    @staticmethod
    def normalize_type(sql_type: str) -> str:
        """Lower-case a column type and collapse whitespace: DECIMAL(10, 2) → decimal(10,2)."""
        sql_type = " ".join(sql_type.lower().split())
        return re.sub(r"\s*([(),])\s*", r"\1", sql_type)

    def parse_file(self, file_path, selected_tables: Optional[List[str]] = None) -> List[Field]:
        """
        Parse a DDL file.

        Raises:
            FileNotFoundError: If the file does not exist
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"DDL file not found: {path}")
        return self.parse(path.read_text(encoding="utf-8"), selected_tables)

    def parse(self, sql_content: str, selected_tables: Optional[List[str]] = None) -> List[Field]:
        """
        Parse DDL content.

        Args:
            sql_content: SQL script content
            selected_tables: Optional list of table names to include

        Returns:
            List of Fields in declaration order
        """
        if not self.dialect:
            self.dialect = SqlDialectDetector.detect(sql_content)

        # MSSQL batch separators confuse statement splitting
        cleaned = re.sub(r"^\s*GO\s*$", ";", sql_content, flags=re.IGNORECASE | re.MULTILINE)
        cleaned = sqlparse.format(cleaned, strip_comments=True)

        fields: List[Field] = []
        for statement in sqlparse.parse(cleaned):
            if statement.get_type() != "CREATE":
                continue

            table_fields = self._parse_create_table(statement.value.strip())
            if not table_fields:
                continue
            if selected_tables is not None and table_fields[0].table not in selected_tables:
                continue
            fields.extend(table_fields)

        logger.info(f"Read {len(fields)} column(s) from DDL ({self.dialect})")
        return fields

    def _parse_create_table(self, statement: str) -> List[Field]:
        match = _TABLE_HEADER.search(statement)
        if not match:
            return []

        schema_name, table_name = match.group(1), match.group(2)
        body = SqlParser._extract_body(statement, match.end() - 1)
        if body is None:
            logger.warning(f"Unbalanced parentheses in CREATE TABLE {table_name}")
            return []

        schema = schema_name or (self.dialect if self.dialect and self.dialect != "unknown" else None)

        fields: List[Field] = []
        table_constraints: List[Tuple[ConstraintKind, List[str]]] = []

        for line in SqlParser._split_column_definitions(body):
            constraint = SqlParser._parse_constraint_definition(line)
            if constraint is not None:
                if constraint[0] is not None:
                    table_constraints.append(constraint)
                continue

            column = self._parse_column_definition(line, schema, table_name)
            if column:
                fields.append(column)

        return SqlParser._apply_table_constraints(fields, table_constraints)

    @staticmethod
    def _extract_body(statement: str, open_index: int) -> Optional[str]:
        depth = 0
        for index in range(open_index, len(statement)):
            char = statement[index]
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
                if depth == 0:
                    return statement[open_index + 1:index]
        return None

    @staticmethod
    def _split_column_definitions(columns_def: str) -> List[str]:
        """Split on top-level commas only."""
        lines = []
        current = ""
        depth = 0

        for char in columns_def:
            if char == "(":
                depth += 1
            elif char == ")":
                depth -= 1
            elif char == "," and depth == 0:
                lines.append(current.strip())
                current = ""
                continue

            current += char

        if current.strip():
            lines.append(current.strip())

        return lines

    def _parse_column_definition(self, line: str, schema: Optional[str], table: str) -> Optional[Field]:
        match = _COLUMN.match(line)
        if not match:
            logger.debug(f"Skipping unreadable column definition: {line}")
            return None

        name = match.group(1)
        flags = " ".join(match.group(3).upper().split())

        constraints = []
        if "PRIMARY KEY" in flags:
            constraints.append(ConstraintKind.PRIMARY_KEY)
        if re.search(r"\bUNIQUE\b", flags):
            constraints.append(ConstraintKind.UNIQUE)
        if "NOT NULL" in flags:
            constraints.append(ConstraintKind.NOT_NULL)

        qualifier = f"{schema}.{table}" if schema else table
        return Field(
            id=f"{qualifier}.{name}",
            name=name,
            type=SqlParser.normalize_type(match.group(2)),
            nullable=(
                ConstraintKind.PRIMARY_KEY not in constraints
                and ConstraintKind.NOT_NULL not in constraints
            ),
            constraints=tuple(constraints),
            origin=FieldOrigin.DATABASE,
            schema=schema,
            table=table,
        )

    @staticmethod
    def _parse_constraint_definition(line: str) -> Optional[Tuple[Optional[ConstraintKind], List[str]]]:
        """
        Parse a table-level constraint line.

        Returns (kind, columns) for constraint lines, kind being None for
        constraints the rules do not use, and None for column lines.
        """
        if not _TABLE_CONSTRAINT.match(line.strip()):
            return None

        upper = " ".join(line.upper().split())

        # CONSTRAINT pk_users PRIMARY KEY (id)
        body = re.sub(r"^CONSTRAINT\s+\S+\s+", "", upper)
        columns_match = re.search(r"\(([^)]+)\)", line)
        columns = (
            [c.strip().strip('`"[]') for c in columns_match.group(1).split(",")]
            if columns_match
            else []
        )

        if body.startswith("PRIMARY KEY"):
            return ConstraintKind.PRIMARY_KEY, columns
        if body.startswith("UNIQUE"):
            return ConstraintKind.UNIQUE, columns

        return None, []

    @staticmethod
    def _apply_table_constraints(
        fields: List[Field],
        table_constraints: List[Tuple[ConstraintKind, List[str]]],
    ) -> List[Field]:
        result = []
        for column in fields:
            extra = [
                kind for kind, columns in table_constraints
                if column.name.lower() in (c.lower() for c in columns)
                and kind not in column.constraints
            ]
            if extra:
                constraints = column.constraints + tuple(extra)
                nullable = column.nullable and ConstraintKind.PRIMARY_KEY not in constraints
                column = dataclasses.replace(column, constraints=constraints, nullable=nullable)
            result.append(column)
        return result


def index_columns(fields: List[Field]) -> Dict[str, Field]:
    """
    Index columns by lower-cased "table.column" and "schema.table.column".

    Later definitions of the same table win.
    """
    index: Dict[str, Field] = {}
    for column in fields:
        index[f"{column.table}.{column.name}".lower()] = column
        if column.schema:
            index[f"{column.schema}.{column.table}.{column.name}".lower()] = column
    return index
