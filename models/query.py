from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, field_validator


class LifecycleState(str, Enum):
    STARTING = "starting"
    READY = "ready"


class QueryRequest(BaseModel):
    """
    Request envelope shared by every query endpoint.

    Notes:
    - `params` binds positionally to `?` placeholders in `query`.
    - Unknown keys are ignored so harnesses can send extra bookkeeping fields.
    """

    model_config = ConfigDict(extra="ignore")

    query: Optional[str] = Field(None, description="SQL statement using `?` placeholders")
    params: List[Any] = Field(default_factory=list, description="Positional parameter values")

    @field_validator("params", mode="before")
    @classmethod
    def _none_means_no_params(cls, value: Any) -> Any:
        return [] if value is None else value


@dataclass
class Rows:
    """Result set of a statement that returns rows (possibly none)."""

    rows: List[Dict[str, Any]] = field(default_factory=list)


@dataclass
class Mutation:
    """Outcome of a statement that returns no result set."""

    affected_rows: int = 0
    insert_id: int = 0


QueryResult = Union[Rows, Mutation]


@dataclass
class Success:
    body: Any


@dataclass
class ClientError:
    message: str
    status_code: int = 400


@dataclass
class ExecutionError:
    message: str
    status_code: int = 500


Outcome = Union[Success, ClientError, ExecutionError]
