"""Core building blocks shared across features."""
