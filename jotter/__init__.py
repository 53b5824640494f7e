"""
Jotter.

- backend/: API, persistence, services, and the note-writer agent
- cli/: Operator CLI (Typer + Rich)
"""
