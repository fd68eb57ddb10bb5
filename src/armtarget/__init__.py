"""Translate GCC ARM target flags to and from structured target descriptors."""
