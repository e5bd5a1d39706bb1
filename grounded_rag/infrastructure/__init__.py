"""Capa de infraestructura (adapters de texto, almacenamiento y providers)."""
