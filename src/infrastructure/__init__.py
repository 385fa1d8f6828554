"""
Infrastructure layer - external service integrations.

- storage: Workout log persistence (JSON file or in-memory)

These wrappers translate between stored formats and our domain models.
"""
