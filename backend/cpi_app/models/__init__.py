# SQLAlchemy Models Package

from .calculation import CalculationHistory, CityComparison

__all__ = [
    "CalculationHistory",
    "CityComparison",
]
