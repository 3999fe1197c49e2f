# --
# Process-wide constants. These are read once and never mutated, the
# server options and the file store are built from them at startup.

PORT: int = 1900

# Listens on all interfaces
HOST: str = "0.0.0.0"  # nosec: B104

# Requests with more bytes than this available are dropped without reading.
REQUEST_LIMIT: int = 16_384

REQUEST_ENCODING: str = "ascii"
LISTING_ENCODING: str = "utf8"

# Name of the file served when a directory is requested
INDEX: str = "index"

LOG_REQUESTS: bool = True

# EOF
