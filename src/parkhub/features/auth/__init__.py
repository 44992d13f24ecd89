"""Auth feature: credential checks and operation authorization."""
