"""Data-access functions for users and posts."""
