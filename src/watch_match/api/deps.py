"""FastAPI dependencies for the reference library and matching config."""

from functools import lru_cache

from watch_match.config.settings import get_settings
from watch_match.db.session import get_session_factory
from watch_match.library.repository import ReferenceLibrary, SqlReferenceLibrary
from watch_match.matching.config import MatchingConfig, load_matching_config


def get_library() -> ReferenceLibrary:
    """Return the SQL-backed reference library."""
    return SqlReferenceLibrary(get_session_factory())


@lru_cache
def get_matching_config() -> MatchingConfig:
    """Load the matching config once per process."""
    return load_matching_config(get_settings().matching_config_path)
