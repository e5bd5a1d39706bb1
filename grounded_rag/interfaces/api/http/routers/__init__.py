"""Sub-routers HTTP por feature."""
