"""Events feature: fire-and-forget notifications after entity creation."""
