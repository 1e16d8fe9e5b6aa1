"""Core models, errors and logging helpers shared across nxkit."""
