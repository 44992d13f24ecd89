"""Cars feature: vehicles owned by identities."""
