"""Core building blocks: exceptions, identifiers and shared result types."""
