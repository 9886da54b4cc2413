"""JSON exporter for validation reports."""
import json
import logging
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, List, Optional

from fieldmap.validator.results import ValidationResult, ValidationSummary

logger = logging.getLogger(__name__)


class JsonExporter:
    """Export validation reports to JSON."""

    @staticmethod
    def build_report(
        summary: ValidationSummary,
        results: List[ValidationResult],
        mapping_file: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Build the report document."""
        return {
            "metadata": {
                "created_at": datetime.now().isoformat(),
                "mapping_file": mapping_file or "",
                "status": summary.status.value,
                "overall_score": summary.overall_score,
            },
            "summary": summary.to_dict(),
            "results": [r.to_dict() for r in results],
        }

    def export(
        self,
        output_file: Path,
        summary: ValidationSummary,
        results: List[ValidationResult],
        mapping_file: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Export to JSON file and return the written document."""
        output_file = Path(output_file)
        output_file.parent.mkdir(parents=True, exist_ok=True)

        data = JsonExporter.build_report(summary, results, mapping_file)

        with open(output_file, "w", encoding="utf-8") as f:
            json.dump(data, f, indent=2, ensure_ascii=False, default=str)

        logger.info(f"Validation report written to {output_file}")
        return data
