"""Parking services."""

from .parking_service import ParkingService

__all__ = ["ParkingService"]
