"""
Constants for the tif gateway client library.
Header names and defaults shared with the gateway's signing scheme.
"""

# Outbound authentication headers
HEADER_TIF_PAASID = "X-Tif-Paasid"
HEADER_TIF_TIMESTAMP = "X-Tif-Timestamp"
HEADER_TIF_NONCE = "X-Tif-Nonce"
HEADER_TIF_SIGNATURE = "X-Tif-Signature"

# Caller context headers added by the gateway on inbound requests
HEADER_TIF_UID = "X-Tif-Uid"
HEADER_TIF_UINFO = "X-Tif-Uinfo"
HEADER_TIF_EXT = "X-Tif-Ext"

# Default configuration values
DEFAULT_CONFIG = {
    'time_offset_limit': 180,   # signature window in seconds
    'timeout': 30,              # HTTP timeout in seconds
    'max_retries': 0,           # retries on connection failures
    'retry_backoff': 0.5,       # urllib3 backoff factor
    'nonce_size': 10,           # bytes, hex encoded to 20 chars
}

# Other constants
DEFAULT_TIME_OFFSET_LIMIT = 180
DEFAULT_NONCE_SIZE = 10
ERROR_BODY_SNAPSHOT_SIZE = 512
