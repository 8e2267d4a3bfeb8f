"""Engagement domain: limits and cache keys."""

# Per-user comment rate limit (Redis-backed, skipped when Redis is disabled)
COMMENT_RATE_LIMIT = 5  # max comments per window
COMMENT_RATE_WINDOW = 60  # seconds
COMMENT_RATE_KEY = "inkwell:rate:comment:{user_id}"

COMMENT_MAX_LENGTH = 2000
