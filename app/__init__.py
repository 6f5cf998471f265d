"""Prize wheel unique code service."""
