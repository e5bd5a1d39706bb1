"""Capa de aplicación (casos de uso, prompts y contrato de respuesta)."""
