"""SQL dialect detection for DDL files."""
import re
from typing import Dict, List


class SqlDialectDetector:
    """Detects which SQL dialect a DDL script is written in."""

    INDICATORS: Dict[str, List[str]] = {
        "postgresql": [
            r"\bserial\b",
            r"\bbigserial\b",
            r"\bjsonb\b",
            r"\bbytea\b",
            r"\btimestamptz\b",
            r"\bcharacter\s+varying\b",
            r"\bgenerated\s+(?:always|by\s+default)\s+as\s+identity\b",
            r"::\w+",
        ],
        "mysql": [
            r"\bauto_increment\b",
            r"\bengine\s*=\s*\w+",
            r"`\w+`",
            r"\bcharacter\s+set\b",
            r"\bunsigned\b",
            r"\b(?:tiny|medium|long)text\b",
        ],
        "mssql": [
            r"\bidentity\s*\(\s*\d+\s*,\s*\d+\s*\)",
            r"\[\w+\]",
            r"\bnvarchar\s*\(\s*max\s*\)",
            r"\buniqueidentifier\b",
            r"\bdatetime2\b",
            r"^\s*go\s*$",
            r"\bdbo\.",
        ],
    }

    @staticmethod
    def suggest_dialects(sql_content: str) -> Dict[str, int]:
        """
        Score each dialect by the number of indicators found.

        Returns:
            dict: {dialect: score, ...}
        """
        return {
            dialect: sum(
                1 for pattern in patterns
                if re.search(pattern, sql_content, re.IGNORECASE | re.MULTILINE)
            )
            for dialect, patterns in SqlDialectDetector.INDICATORS.items()
        }

    @staticmethod
    def detect(sql_content: str) -> str:
        """
        Detect the SQL dialect of the content.

        Returns:
            str: 'postgresql', 'mysql', 'mssql' or 'unknown'
        """
        scores = SqlDialectDetector.suggest_dialects(sql_content or "")
        best_dialect = max(scores, key=scores.get)

        if scores[best_dialect] == 0:
            return "unknown"

        return best_dialect
