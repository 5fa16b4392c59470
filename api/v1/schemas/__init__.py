"""Re-export individual schema modules for easy imports."""

from .profile import ProfileIn, ProfileCreate, ProfileOut
from .plan import AdjustIn, BMIOut, PlanOut, PlanResponse
from .progress import DailyOut, ProgressOut, WeightIn, WeightOut
from .meal import AnalyzeImageIn, AnalyzeTextIn, MealIn, MealOut, QuickFoodIn

__all__ = [
    "ProfileIn",
    "ProfileCreate",
    "ProfileOut",
    "AdjustIn",
    "BMIOut",
    "PlanOut",
    "PlanResponse",
    "DailyOut",
    "ProgressOut",
    "WeightIn",
    "WeightOut",
    "AnalyzeImageIn",
    "AnalyzeTextIn",
    "MealIn",
    "MealOut",
    "QuickFoodIn",
]
