from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.fitness_calc import FitnessInput, Gender


class FitnessForm(BaseModel):
    """The five answers as typed by the user, parsed and checked."""

    age: int = Field(..., gt=0, description="years")
    height_in: float = Field(..., gt=0, description="inches")
    weight_lbs: float = Field(..., gt=0, description="pounds")
    gender: Gender = Field(..., description="male or female, case-insensitive")
    activity_hours: float = Field(..., ge=0, description="exercise hours per week")

    model_config = ConfigDict(str_strip_whitespace=True, allow_inf_nan=False, frozen=True)

    @field_validator("gender", mode="before")
    @classmethod
    def _normalise_gender(cls, v: object) -> Gender:
        # InvalidGender is a ValueError, so pydantic reports it per field
        return Gender.parse(v)

    def to_input(self) -> FitnessInput:
        return FitnessInput(
            age=self.age,
            height_inches=self.height_in,
            weight_lbs=self.weight_lbs,
            gender=self.gender,
            activity_hours=self.activity_hours,
        )
