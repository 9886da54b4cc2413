"""Loader for mapping files exported by the mapping editor."""
import json
import logging
from pathlib import Path
from typing import Any, List, Optional

from fieldmap.mapper.mapping import Mapping
from fieldmap.parser.sql_parser import index_columns
from fieldmap.schema.models import Field, FieldOrigin

logger = logging.getLogger(__name__)


class MappingFileParser:
    """
    Parses mapping documents.

    Accepted shapes:

        {"mappings": [{"source": {...}, "target": {...}}, ...]}
        [{"sourceField": {...}, "targetField": "users.email"}, ...]

    A target given as a "table.column" (or "schema.table.column") string is
    resolved against the columns read from DDL.
    """

    def __init__(self, columns: Optional[List[Field]] = None):
        """Initialize parser with optional DDL columns for reference lookup."""
        self.columns = index_columns(columns or [])

    def parse_file(self, file_path) -> List[Mapping]:
        """
        Parse a mapping file.

        Raises:
            FileNotFoundError: If the file does not exist
            ValueError: If the content is not a valid mapping document
        """
        path = Path(file_path)
        if not path.exists():
            raise FileNotFoundError(f"Mapping file not found: {path}")
        return self.parse(path.read_text(encoding="utf-8"))

    def parse(self, content: str) -> List[Mapping]:
        """Parse mapping JSON text."""
        try:
            data = json.loads(content)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid mapping JSON: {e}") from e
        return self.parse_data(data)

    def parse_data(self, data: Any) -> List[Mapping]:
        """Parse an already decoded mapping document."""
        if isinstance(data, dict):
            entries = data.get("mappings")
        else:
            entries = data

        if not isinstance(entries, list):
            raise ValueError("Mapping document must be a list or an object with a 'mappings' list")

        mappings = [self._parse_entry(entry, position) for position, entry in enumerate(entries, 1)]
        logger.info(f"Loaded {len(mappings)} mapping(s)")
        return mappings

    def _parse_entry(self, entry: Any, position: int) -> Mapping:
        if not isinstance(entry, dict):
            raise ValueError(f"Mapping #{position} must be an object")

        entry = dict(entry)
        for keys, origin in (
            (("target_field", "targetField", "target"), FieldOrigin.DATABASE),
            (("source_field", "sourceField", "source"), FieldOrigin.API),
        ):
            for key in keys:
                if isinstance(entry.get(key), str):
                    entry[key] = self._resolve_reference(entry[key], origin, position)

        return Mapping.from_dict(entry)

    def _resolve_reference(self, reference: str, origin: FieldOrigin, position: int) -> Field:
        if origin == FieldOrigin.API:
            raise ValueError(f"Mapping #{position}: source must be a field object, got {reference!r}")

        column = self.columns.get(reference.strip().lower())
        if column is None:
            raise ValueError(f"Mapping #{position}: unknown column reference {reference!r}")
        return column
