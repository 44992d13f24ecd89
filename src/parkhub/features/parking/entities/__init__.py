"""Parking entities."""

from .parking import Parking, ParkingCarLink, validate_price

__all__ = ["Parking", "ParkingCarLink", "validate_price"]
