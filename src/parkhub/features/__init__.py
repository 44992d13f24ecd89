"""Feature modules for parkhub."""
