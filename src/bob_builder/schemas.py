"""Request and response models for the generation endpoints."""

from __future__ import annotations

from typing import Any, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class _Inputs(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    @field_validator("*", mode="before")
    @classmethod
    def _none_to_default(cls, value: Any, info) -> Any:
        # A JSON null means "not provided": free text becomes "", flags their default.
        if value is not None:
            return value
        field = cls.model_fields.get(info.field_name)
        if field is None or field.is_required():
            return value
        return field.get_default(call_default_factory=True)


class LeapOfFaithInputs(_Inputs):
    customer: str = ""
    problem: str = ""
    solution: str = ""
    circle_type: Literal["assumption", "hypothesis"] = Field("assumption", alias="circleType")
    leap_of_faith_results: List[str] = Field(default_factory=list, alias="leapOfFaithResults")

    @model_validator(mode="before")
    @classmethod
    def _null_circle_is_hypothesis(cls, data: Any) -> Any:
        # Only an explicit "assumption" runs the first step; a null circle type is the second.
        if isinstance(data, dict):
            for key in ("circleType", "circle_type"):
                if key in data and data[key] is None:
                    data = {**data, key: "hypothesis"}
        return data

    @field_validator("leap_of_faith_results", mode="before")
    @classmethod
    def _coerce_results(cls, value: Any) -> Any:
        if value is None:
            return []
        if isinstance(value, list):
            return [str(item) for item in value if item is not None]
        return value


class MomTestInputs(_Inputs):
    idea: str = ""
    passion: str = ""
    qualified: str = ""
    audience: str = ""
    assumption_category: str = ""
    hypothesis: str = ""
    context: str = ""


class ImageInputs(_Inputs):
    idea: str = ""
    passion: str = ""
    qualified: str = ""
    audience: str = ""
    style_preset: Optional[str] = Field(None, alias="stylePreset")
    aspect: Optional[str] = None
    allow_text: bool = Field(False, alias="allowText")
    n: Optional[int] = None
    seed: Optional[int] = None
    user_id: str = Field("anon", alias="userId")

    @field_validator("user_id", mode="before")
    @classmethod
    def _default_user(cls, value: Any) -> Any:
        return value or "anon"


class Question(BaseModel):
    q: str = Field(min_length=1)
    assumption_tag: str = Field(min_length=1)
    why_it_works: str = Field(min_length=1)
    signal_to_listen_for: str = Field(min_length=1)
    priority: Literal[1, 2, 3]

    @field_validator("priority", mode="before")
    @classmethod
    def _exact_int(cls, value: Any) -> Any:
        # Lax mode would turn true into 1 and 2.0 into 2.
        if type(value) is not int:
            raise ValueError("priority must be the integer 1, 2 or 3")
        return value


class MomTestOutput(BaseModel):
    assumption_category: str
    hypothesis: str
    audience: str
    questions: List[Question] = Field(min_length=10, max_length=10)


class GeneratedImage(BaseModel):
    dataUrl: str = Field(min_length=1)
    seed: int
