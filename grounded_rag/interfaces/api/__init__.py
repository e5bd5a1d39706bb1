"""Interfaces de API."""
