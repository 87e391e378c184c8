from typing import Optional, Dict, Any, List
from pydantic import BaseModel, ConfigDict, Field, field_validator, model_serializer, model_validator
from enum import Enum


class DatabaseType(str, Enum):
    REDSHIFT = "redshift"
    POSTGRES = "postgres"


class DatabaseCredentials(BaseModel):
    """Connection target for a single query request"""
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    id: Optional[str] = Field(default=None, description="Named preset to resolve instead of inline credentials")
    database_type: DatabaseType = Field(default=DatabaseType.REDSHIFT, alias="databaseType")
    host: Optional[str] = Field(default=None, description="e.g. workgroup-name.account-id.region.redshift-serverless.amazonaws.com")
    port: Optional[int] = None
    database: Optional[str] = None
    user: Optional[str] = None
    password: Optional[str] = Field(default=None, repr=False)
    schema_name: Optional[str] = Field(default=None, alias="schema")
    connection_string: Optional[str] = Field(default=None, alias="connectionString", repr=False)

    @field_validator("database_type", mode="before")
    @classmethod
    def _unknown_type_is_redshift(cls, value: Any) -> DatabaseType:
        # Only postgres has its own executor
        if value == DatabaseType.POSTGRES:
            return DatabaseType.POSTGRES
        return DatabaseType.REDSHIFT


class QueryRequest(BaseModel):
    """Request model for executing a query"""
    model_config = ConfigDict(populate_by_name=True)

    code: str = Field(..., description="SQL query to execute")
    redshift_credentials: Optional[DatabaseCredentials] = Field(
        default=None,
        alias="redshiftCredentials",
        description="Inline credentials or a preset reference; defaults to the default preset",
    )


class QueryResult(BaseModel):
    """Uniform response envelope for every query execution attempt"""
    model_config = ConfigDict(frozen=True)

    columns: List[str] = Field(default_factory=list, description="Column names in warehouse order")
    rows: List[Dict[str, Any]] = Field(default_factory=list, description="One mapping per row, keyed by column name")
    error: Optional[str] = Field(default=None, description="Error message if query failed")
    query: Optional[str] = Field(default=None, description="The SQL text that was executed")

    @model_validator(mode="after")
    def _empty_on_error(self) -> "QueryResult":
        if self.error is not None and (self.columns or self.rows):
            raise ValueError("a failed result cannot carry columns or rows")
        return self

    @model_serializer(mode="wrap")
    def _omit_empty_optionals(self, handler):
        data = handler(self)
        for key in ("error", "query"):
            if data.get(key) is None:
                data.pop(key, None)
        return data

    @classmethod
    def failure(cls, error: str, query: Optional[str] = None) -> "QueryResult":
        return cls(columns=[], rows=[], error=error, query=query)
