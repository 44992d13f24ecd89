"""Car services."""

from .car_service import CarService

__all__ = ["CarService"]
