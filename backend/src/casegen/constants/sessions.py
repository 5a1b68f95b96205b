"""Session store configuration.

Sessions map an opaque id handed to the browser to the GitHub access token
obtained during OAuth. They live in process memory only.
"""

# =============================================================================
# Lifetime
# =============================================================================
# A session expires after SESSION_TTL_MINUTES without use. MAX_SESSIONS bounds
# memory; when exceeded the least recently used session is dropped.

SESSION_TTL_MINUTES = 8 * 60
MAX_SESSIONS = 10_000
