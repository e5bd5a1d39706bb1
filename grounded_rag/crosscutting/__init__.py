"""Crosscutting: config, logging, errores, timing y middleware HTTP."""
