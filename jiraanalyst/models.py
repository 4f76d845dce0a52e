"""
models.py

Value objects that flow through the report pipeline. All are immutable; a new object is
built at each stage rather than mutating the previous one.
"""
import datetime
import json
from dataclasses import dataclass, replace
from typing import Any, Dict, List, Optional, Sequence, Tuple, Union

CellValue = Union[str, int, float, bool, datetime.date, datetime.datetime, None]
Row = Sequence[CellValue]
RawTable = Sequence[Row]


def cell_to_text(value: CellValue) -> str:
    """String form of a cell used for key matching and serialization. Empty cells become ''."""
    if value is None:
        return ""
    if isinstance(value, (datetime.datetime, datetime.date)):
        return value.isoformat()
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


@dataclass(frozen=True)
class NormalizedTable:
    header: Tuple[CellValue, ...]
    rows: Tuple[Tuple[CellValue, ...], ...]

    def as_rows(self) -> List[List[CellValue]]:
        return [list(self.header)] + [list(row) for row in self.rows]

    def __len__(self):
        return 1 + len(self.rows)

    def to_json(self) -> str:
        """Deterministic JSON array of arrays, header first."""
        grid = [[cell_to_text(cell) for cell in row] for row in self.as_rows()]
        return json.dumps(grid, ensure_ascii=False)


@dataclass(frozen=True)
class IssueRecord:
    issue_key: str
    summary: str
    status: str = ""
    assignee: str = ""
    recommendation: str = ""
    created_date: Optional[str] = None
    resolved_date: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "issueKey": self.issue_key,
            "summary": self.summary,
            "status": self.status,
            "assignee": self.assignee,
            "recommendation": self.recommendation,
        }
        if self.created_date:
            data["createdDate"] = self.created_date
        if self.resolved_date:
            data["resolvedDate"] = self.resolved_date
        return data

    def with_changes(self, **changes) -> "IssueRecord":
        return replace(self, **changes)


@dataclass(frozen=True)
class AggregateResult:
    summary: str
    priority_actions: Tuple[str, ...]


@dataclass(frozen=True)
class Report:
    summary: str
    priority_actions: Tuple[str, ...]
    issue_breakdown: Tuple[IssueRecord, ...]
    focus: Optional[str] = None
    generated_at: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data = {
            "summary": self.summary,
            "priorityActions": list(self.priority_actions),
            "issueBreakdown": [record.to_dict() for record in self.issue_breakdown],
        }
        if self.generated_at:
            data["generatedAt"] = self.generated_at
        if self.focus:
            data["focus"] = self.focus
        return data
