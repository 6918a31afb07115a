from .category_service import list_categories, get_category, create_custom_category, seed_default_categories
from .session_service import create_session, list_sessions, get_session, update_session, archive_session, get_session_stats
from .message_service import create_message, list_messages, toggle_bookmark
from .profile_service import get_or_create_profile, upsert_profile
from .storage_service import create_avatar_upload_url

__all__ = [
    "list_categories", "get_category", "create_custom_category", "seed_default_categories",
    "create_session", "list_sessions", "get_session", "update_session", "archive_session", "get_session_stats",
    "create_message", "list_messages", "toggle_bookmark",
    "get_or_create_profile", "upsert_profile",
    "create_avatar_upload_url",
]
