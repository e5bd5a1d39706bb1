"""Capa de interfaces (bordes de entrada)."""
