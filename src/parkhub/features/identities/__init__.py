"""Identities feature: accounts that own cars."""
