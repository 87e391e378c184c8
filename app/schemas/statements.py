from enum import Enum
from typing import Any, Dict, List, NamedTuple, Optional
from pydantic import BaseModel, Field


class StatementStatus(str, Enum):
    SUBMITTED = "SUBMITTED"
    PICKED = "PICKED"
    STARTED = "STARTED"
    FINISHED = "FINISHED"
    FAILED = "FAILED"


PENDING_STATUSES = frozenset({
    StatementStatus.SUBMITTED.value,
    StatementStatus.PICKED.value,
    StatementStatus.STARTED.value,
})


class StatementHandle(NamedTuple):
    """Opaque reference to one submitted statement.

    ``result_id`` differs from ``statement_id`` when the statement was sent as
    a batch (schema-scoped queries), where the result of interest belongs to
    the last sub-statement.
    """
    statement_id: str
    result_id: str


class StatementDescription(BaseModel):
    status: str = ""
    error: Optional[str] = None


class ColumnMetadata(BaseModel):
    name: Optional[str] = None


class StatementResult(BaseModel):
    column_metadata: List[ColumnMetadata] = Field(default_factory=list)
    records: List[List[Dict[str, Any]]] = Field(default_factory=list)
