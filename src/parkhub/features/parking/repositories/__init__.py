"""Parking repositories."""

from .parking_repository import ParkingRepository

__all__ = ["ParkingRepository"]
