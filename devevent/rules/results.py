"""Outcome of running record rules before a write."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from devevent.exceptions import RecordError


class RuleResult(BaseModel):
    """Normalized field values, or the first rule that failed."""

    model_config = ConfigDict(arbitrary_types_allowed=True)

    values: dict[str, Any] = Field(default_factory=dict)
    error: RecordError | None = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, values: dict[str, Any]) -> "RuleResult":
        return cls(values=values)

    @classmethod
    def failure(cls, error: RecordError) -> "RuleResult":
        return cls(error=error)

    def unwrap(self) -> dict[str, Any]:
        """Return the values, raising the recorded error if a rule failed."""
        if self.error is not None:
            raise self.error
        return self.values

    def __str__(self) -> str:
        if self.ok:
            return f"ok ({', '.join(sorted(self.values))})"
        return f"failed: {self.error}"
