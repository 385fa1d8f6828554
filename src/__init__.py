"""
Swim Log - free-text swim workout parsing and logging.

This package contains the complete application:
- core: Framework-agnostic parsing and workout log models
- infrastructure: Workout log storage
- api: FastAPI routes and dependencies
- config: Application configuration
"""

__version__ = "0.1.0"
