"""
Result types returned by the DaData client.
"""

import json
from dataclasses import dataclass, field
from typing import Any


@dataclass
class CleanResult:
    """
    Outcome of a cleansing call.

    `value` is what the selector produced (a single value, a list, or a
    mapping of the caller's keys). `records` is the untouched response
    array, in request order.
    """

    kind: str
    value: Any
    records: list[dict[str, Any]] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        value = self.value
        if isinstance(value, dict):
            value = {str(k): v for k, v in value.items()}
        return {
            "kind": self.kind,
            "value": value,
            "records": self.records,
        }

    def to_json(self) -> str:
        """Serialize to JSON string."""
        return json.dumps(self.to_dict(), ensure_ascii=False, indent=None)
