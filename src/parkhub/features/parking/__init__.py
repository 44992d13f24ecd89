"""Parking feature: parking lots and the car assignment."""
