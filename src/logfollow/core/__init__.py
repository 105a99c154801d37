"""Core utilities shared across logfollow."""
