"""Shared infrastructure for the music catalog service."""
