"""Workspace configuration access: JSON files, projects and ignore patterns."""
