"""Shared constants for the content migration tool."""

# Object store layout
DEFAULT_DEST_BUCKET = "da-content"
SOURCE_BUCKET_SUFFIX = "-content"
DEFAULT_PAGE_SIZE = 100

# Timeouts (seconds)
DEFAULT_COPY_TIMEOUT = 60.0
DEFAULT_REQUEST_TIMEOUT = 30.0

# HTTP status codes
HTTP_OK = 200
HTTP_UNAUTHORIZED = 401
HTTP_FORBIDDEN = 403
HTTP_NOT_FOUND = 404

# Status documents
RESULTS_FILE_SUFFIX = ".results.json"

# Logging
LOGGER_NAME = "content_migrator"
