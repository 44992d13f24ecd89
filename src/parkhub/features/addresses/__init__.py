"""Addresses feature: locations that parkings occupy."""
