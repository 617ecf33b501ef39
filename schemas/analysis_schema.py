from datetime import date
from typing import List, Optional, Union

from pydantic import BaseModel, Field, StrictFloat, StrictInt, StrictStr, model_validator

from schemas import CamelModel

# JSON numbers only: no numeric strings, no booleans.
Number = Union[StrictInt, StrictFloat]


class NutritionInfo(BaseModel):
    calories: Number
    protein: Number
    carbs: Number
    fats: Number
    fiber: Number


class FoodDetail(CamelModel):
    name: Optional[StrictStr] = None
    calories: Optional[Number] = None
    protein: Optional[Number] = None
    carbs: Optional[Number] = None
    fats: Optional[Number] = None
    fiber: Optional[Number] = None


class FoodAnalysisResult(CamelModel):
    """Shape the vision model must reply with."""

    foods: List[StrictStr]
    nutrition: NutritionInfo
    analysis: StrictStr
    suggestions: List[StrictStr]
    food_details: Optional[List[FoodDetail]] = None


class AnalyzeFoodRequest(CamelModel):
    image: StrictStr = Field(min_length=1)


class SaveAnalysisRequest(CamelModel):
    foods: List[StrictStr] = Field(default_factory=list)
    calories: float = Field(ge=0, allow_inf_nan=False)
    protein: float = Field(ge=0, allow_inf_nan=False)
    carbs: float = Field(ge=0, allow_inf_nan=False)
    fats: float = Field(ge=0, allow_inf_nan=False)
    fiber: float = Field(ge=0, allow_inf_nan=False)
    analysis: StrictStr
    suggestions: List[StrictStr] = Field(default_factory=list)
    image_url: Optional[StrictStr] = None
    user_id: Optional[int] = Field(default=None, gt=0)
    language: Optional[StrictStr] = None
    meal_type: Optional[StrictStr] = Field(default=None, max_length=32)
    serving_size: Optional[StrictStr] = Field(default=None, max_length=64)
    food_details: Optional[List[FoodDetail]] = None


class UpdateAnalysisRequest(CamelModel):
    foods: Optional[List[StrictStr]] = None
    calories: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    protein: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    carbs: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    fats: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    fiber: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    analysis: Optional[StrictStr] = None
    suggestions: Optional[List[StrictStr]] = None
    image_url: Optional[StrictStr] = None
    meal_type: Optional[StrictStr] = Field(default=None, max_length=32)
    serving_size: Optional[StrictStr] = Field(default=None, max_length=64)
    food_details: Optional[List[FoodDetail]] = None


class HistoryQuery(CamelModel):
    user_id: Optional[int] = Field(default=None, gt=0)
    limit: Optional[int] = Field(default=None, gt=0, le=500)
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @model_validator(mode="after")
    def _check_range(self) -> "HistoryQuery":
        if (self.start_date or self.end_date) and self.user_id is None:
            raise ValueError("userId is required when filtering by date")
        if self.start_date and self.end_date and self.start_date > self.end_date:
            raise ValueError("startDate must not be after endDate")
        return self
