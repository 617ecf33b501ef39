from datetime import date
from typing import Literal, Optional, Union

from pydantic import Field, StrictFloat, StrictInt, StrictStr, model_validator

from schemas import CamelModel

Gender = Literal["male", "female", "other"]
ActivityLevel = Literal["sedentary", "light", "moderate", "active", "very_active"]
Goal = Literal["lose_weight", "maintain", "gain_muscle"]

# Raw form values: the calculator decides whether they are usable.
FormValue = Optional[Union[StrictInt, StrictFloat, StrictStr]]

PERIOD_DAYS = {
    "day": 1,
    "week": 7,
    "month": 30,
}


class ProfileInput(CamelModel):
    weight: float = Field(gt=0, allow_inf_nan=False)
    height: float = Field(gt=0, allow_inf_nan=False)
    age: int = Field(gt=0, lt=150)
    gender: Gender
    activity_level: Optional[ActivityLevel] = None
    goal: Goal = "maintain"


class ProfileUpsertRequest(ProfileInput):
    user_id: int = Field(gt=0)


class TargetsPreviewRequest(CamelModel):
    weight: FormValue = None
    height: FormValue = None
    age: FormValue = None
    gender: Optional[StrictStr] = None
    activity_level: Optional[StrictStr] = None
    goal: Optional[StrictStr] = None


class DailyLogQuery(CamelModel):
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self) -> "DailyLogQuery":
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self


class ProgressQuery(CamelModel):
    period: Literal["day", "week", "month"] = "day"
    day: Optional[date] = Field(default=None, alias="date")

    @model_validator(mode="after")
    def _check_window(self) -> "ProgressQuery":
        if self.day and (self.day - date.min).days < PERIOD_DAYS[self.period] - 1:
            raise ValueError("date is too early for the requested period")
        return self
