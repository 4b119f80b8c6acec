"""Result unions and report models for pipeline steps."""

from dataclasses import dataclass
from typing import Generic, TypeVar, Union

from pydantic import BaseModel, ConfigDict, Field

from datbolt.errors import MigrationError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    value: T


@dataclass(frozen=True)
class Err:
    error: MigrationError

    @property
    def message(self) -> str:
        return str(self.error)


Result = Union[Ok[T], Err]


class TableResult(BaseModel):
    """Outcome of one table (or the user synthesis step)."""

    model_config = ConfigDict(populate_by_name=True)

    success: bool
    records_migrated: int | None = Field(default=None, alias="recordsMigrated")
    error: str | None = None

    @classmethod
    def ok(cls, records_migrated: int) -> "TableResult":
        return cls(success=True, records_migrated=records_migrated)

    @classmethod
    def failed(cls, error: str) -> "TableResult":
        return cls(success=False, error=error)


class ValidationResult(BaseModel):
    source: int | None = None
    target: int | None = None
    match: bool | None = None
    error: str | None = None


class ReportSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    total_tables: int = Field(alias="totalTables")
    successful_tables: int = Field(alias="successfulTables")
    failed_tables: int = Field(alias="failedTables")
    total_records_migrated: int = Field(alias="totalRecordsMigrated")


class MigrationReport(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    timestamp: str
    dry_run: bool = Field(alias="dryRun")
    results: dict[str, TableResult]
    validation: dict[str, ValidationResult] | None = None
    summary: ReportSummary

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True, exclude_none=True, indent=2)
