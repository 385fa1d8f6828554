"""
FastAPI dependency injection.

Dependencies provide the parser, the workout store and configuration to
route handlers. Using dependency injection means:
- Routes don't instantiate their own dependencies (easier to test)
- Dependencies can be overridden in tests
- Configuration is centralized

Each dependency is a function that FastAPI calls when needed.
"""

import logging
from typing import Annotated, Optional

from fastapi import Depends, HTTPException, Security, status
from fastapi.security import APIKeyHeader

from ..config.settings import Settings, get_settings
from ..core.parsing.parser import WorkoutParser
from ..infrastructure.storage.client import (
    StoreConfig,
    WorkoutStore,
    create_workout_store,
)

logger = logging.getLogger(__name__)

# API Key security scheme
api_key_header = APIKeyHeader(name="X-API-Key", auto_error=False)

# One store per process so its write lock covers every request
_workout_store: Optional[WorkoutStore] = None


# ---------------------------------------------------------------------------
# Authentication
# ---------------------------------------------------------------------------

async def verify_api_key(
    settings: Annotated[Settings, Depends(get_settings)],
    api_key: str = Security(api_key_header),
) -> str:
    """
    Validate API key from request header.

    Raises 403 if key is invalid or missing.
    """
    if not api_key:
        logger.warning("Request missing API key")
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="API key required. Provide X-API-Key header.",
        )

    if api_key not in settings.api_keys_list:
        logger.warning(
            "Invalid API key attempt",
            extra={"key_prefix": api_key[:8]}
        )
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Invalid API key",
        )

    return api_key


# ---------------------------------------------------------------------------
# Service Dependencies
# ---------------------------------------------------------------------------

def get_workout_parser(
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkoutParser:
    """
    Provide a WorkoutParser configured from settings.

    The parser is stateless, so a new instance per request costs nothing.
    """
    return WorkoutParser(
        default_system=settings.default_intensity_system,
        strict=settings.parser_strict_groups,
    )


def get_workout_store(
    settings: Annotated[Settings, Depends(get_settings)],
) -> WorkoutStore:
    """
    Provide the workout log store.

    Returns either the JSON file store or the in-memory store based on
    settings. The instance is shared across requests: the mock keeps its
    data for the life of the process, and the file store serializes writes.
    """
    global _workout_store

    if _workout_store is None:
        if settings.workout_store_mock_mode:
            _workout_store = create_workout_store(mock_mode=True)
            logger.info("Created shared mock workout store")
        else:
            _workout_store = create_workout_store(
                config=StoreConfig(path=settings.workout_store_path)
            )
            logger.info(
                "Created shared JSON workout store",
                extra={"path": str(settings.workout_store_path)}
            )

    return _workout_store


def reset_workout_store() -> None:
    """Forget the shared store (used by tests after changing settings)."""
    global _workout_store
    _workout_store = None


# ---------------------------------------------------------------------------
# Convenience Type Aliases
# ---------------------------------------------------------------------------

# These type aliases make route signatures cleaner
AuthenticatedUser = Annotated[str, Depends(verify_api_key)]
WorkoutParserDep = Annotated[WorkoutParser, Depends(get_workout_parser)]
WorkoutStoreDep = Annotated[WorkoutStore, Depends(get_workout_store)]
SettingsDep = Annotated[Settings, Depends(get_settings)]
