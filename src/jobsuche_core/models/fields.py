"""Field projection spec."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from jobsuche_core.exceptions import InvalidFieldSpecError


class FieldSpec(BaseModel):
    """Either an inclusion or an exclusion list of record field names."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    include_fields: list[str] | None = Field(
        default=None, description="If given, only these fields are returned"
    )
    exclude_fields: list[str] | None = Field(
        default=None, description="If given, these fields are omitted"
    )

    def ensure_exclusive(self) -> FieldSpec:
        """Raise InvalidFieldSpecError if both lists are given."""
        if self.include_fields is not None and self.exclude_fields is not None:
            msg = "include_fields and exclude_fields are mutually exclusive"
            raise InvalidFieldSpecError(msg)
        return self
