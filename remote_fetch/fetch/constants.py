"""HTTP constants for the fetch layer.

Centralizes fetch limits and status codes to avoid duplication across modules.
"""

# HTTP Status Code Ranges
HTTP_STATUS_OK_MIN = 200
HTTP_STATUS_OK_MAX = 300
HTTP_STATUS_NO_CONTENT = 204
HTTP_STATUS_NOT_FOUND = 404
HTTP_STATUS_GONE = 410

# Statuses reported as a missing resource rather than a transport failure
NOT_FOUND_STATUSES = frozenset(
    {HTTP_STATUS_NO_CONTENT, HTTP_STATUS_NOT_FOUND, HTTP_STATUS_GONE}
)

# Response Size Limits
DEFAULT_MAX_BYTES = 4 * 1024 * 1024  # 4 MB

# Overall deadline for a single fetch
DEFAULT_TIMEOUT_MILLIS = 30_000

# Scheme applied to scheme-relative request paths
DEFAULT_SCHEME = "http"
ALLOWED_SCHEMES = frozenset({"http", "https"})

# Chunk size for streaming reads
DEFAULT_CHUNK_SIZE = 8192

# Redirect hops followed before giving up
DEFAULT_MAX_REDIRECTS = 5

# Bodies are requested and accepted unencoded so the ceiling counts
# exactly the bytes that end up in memory
IDENTITY_ENCODING = "identity"
