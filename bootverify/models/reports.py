"""Run-level report models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class ArtifactFailure(BaseModel):
    """A hard error raised by one verification attempt."""

    model_config = ConfigDict(frozen=True)

    key: str
    error_type: str
    message: str


class VerifyReport(BaseModel):
    """Summary of one orchestrator run.

    ``verified`` lists keys that passed in this run; ``skipped`` lists
    catalog keys that were not dispatched (no ledger record, already
    verified, or filtered out by focus).  Keys dispatched but neither
    verified nor failed were cancelled or had nothing to verify.
    """

    model_config = ConfigDict(frozen=True)

    dispatched: list[str] = Field(default_factory=list)
    verified: list[str] = Field(default_factory=list)
    skipped: list[str] = Field(default_factory=list)
    failures: list[ArtifactFailure] = Field(default_factory=list)
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        """``True`` when no attempt raised a hard error."""
        return not self.failures

    @property
    def exit_code(self) -> int:
        return 0 if self.ok else 1
