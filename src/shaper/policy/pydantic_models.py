"""Pydantic models mirroring the policy document wire shape.

Used only at the boundary, to validate documents supplied from outside
(files given to the CLI). Numeric leaves may be absent but must be numbers
when present. Their ranges are not checked here: out-of-range values are
advisory issues of the form (see ``shaper.policy.form.validate_form``) and
a document written by the encoder must always load back. The codec itself
never goes through these models.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, StrictFloat, StrictInt, field_validator

# Booleans are not accepted where a number is expected.
NumberField = StrictInt | StrictFloat


class LimitModel(BaseModel):
    """Pydantic model for ``speed_info.limit``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    global_: NumberField | None = Field(default=None, alias="global")
    task: NumberField | None = None


class SpeedTierModel(BaseModel):
    """Pydantic model for one ``speed_info.speed`` scope."""

    model_config = ConfigDict(extra="forbid")

    bs: NumberField | None = None
    vs: NumberField | None = None
    ts: NumberField | None = None


class SpeedModel(BaseModel):
    """Pydantic model for ``speed_info.speed``."""

    model_config = ConfigDict(extra="forbid", populate_by_name=True)

    global_: SpeedTierModel = Field(default_factory=SpeedTierModel, alias="global")
    task: SpeedTierModel = Field(default_factory=SpeedTierModel)


class SpeedInfoModel(BaseModel):
    """Pydantic model for ``responseOnMatch.speed_info``."""

    model_config = ConfigDict(extra="forbid")

    limit: LimitModel = Field(default_factory=LimitModel)
    speed: SpeedModel = Field(default_factory=SpeedModel)
    expire: NumberField | None = None


class ResponseOnMatchModel(BaseModel):
    """Pydantic model for ``filter.responseOnMatch``."""

    model_config = ConfigDict(extra="forbid")

    strategy: str
    strategy_id: str = Field(min_length=1)
    speed_info: SpeedInfoModel = Field(default_factory=SpeedInfoModel)


class MatchClauseModel(BaseModel):
    """Pydantic model for one ``matchAll`` entry."""

    model_config = ConfigDict(extra="forbid")

    match: list[str]

    @field_validator("match")
    @classmethod
    def validate_triple(cls, v: list[str]) -> list[str]:
        """A match is exactly ``[field, operator, value]``."""
        if len(v) != 3:
            raise ValueError(
                f"match must be [field, operator, value], got {len(v)} item(s)"
            )
        if not v[0]:
            raise ValueError("match field must not be empty")
        return v


class FilterModel(BaseModel):
    """Pydantic model for the ``filter`` object."""

    model_config = ConfigDict(extra="forbid")

    desc: str
    responseOnMatch: ResponseOnMatchModel  # noqa: N815
    matchAll: list[MatchClauseModel] = Field(default_factory=list)  # noqa: N815


class PolicyDocumentModel(BaseModel):
    """Pydantic model for a complete policy document."""

    model_config = ConfigDict(extra="forbid")

    filter: FilterModel
