"""Shared constants: cacheable tables, cookie and session names, menu legend."""

# Every table mirrored in memory by the cache provider at startup.
DEFAULT_CACHE_TABLES: tuple[str, ...] = (
    "sessions",
    "members",
    "settings",
    "locales",
    "themes",
    "user_groups",
    "widgets",
    "categories",
    "forums",
    "topics",
    "posts",
    "tags",
    "content_tracker",
    "member_photos",
    "feature_permissions",
    "followed_content",
    "liked_content",
    "forum_clicks",
    "access_logs",
    "admin_logs",
    "content_logs",
    "error_logs",
    "moderation_logs",
    "security_logs",
    "user_activity_logs",
    "member_devices",
    "calendars",
    "calendar_events",
    "profile_visitors",
    "registry",
    "member_attachments",
    "member_cover_photos",
    "content_views_tracker",
    "menu_tracker",
)

# --- Cookies ---
AUTH_TOKEN_COOKIE = "NextBoard_Member_Auth_Token"
DEVICE_ID_COOKIE = "NextBoard_Device_ID"
DEVICE_ID_COOKIE_MAX_AGE = 10 * 365 * 24 * 60 * 60  # 10 years

# --- Session keys ---
SESSION_AUTH_TOKEN = "NextBoard_Member_Auth_Token"
SESSION_SIGNIN_ERROR = "NextBoard_SignIn_Error"
SESSION_ID = "NextBoard_Session_ID"

GUEST_MEMBER_ID = 0

# --- Admin menu ---
MENU_LEGEND: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("general", ("dashboard",)),
    ("forum-management", ("manage-forums", "manage-features")),
)
