"""
Deterministic decoding and display rules.

This file exists to make the fixed grammar and sentinels explicit.
"""

DEFAULT_DELIMITER = ","
DEFAULT_QUOTECHAR = '"'
BYTE_ORDER_MARK = "\ufeff"

# Sentinels returned by the timestamp normalizer; "no value" and "bad value"
# must stay distinct.
NOT_AVAILABLE = "N/A"
MISSING_TIMESTAMP = NOT_AVAILABLE
INVALID_TIMESTAMP = "Invalid Date"

# en-US only, independent of the process locale
MONTH_NAMES = (
    "January", "February", "March", "April", "May", "June",
    "July", "August", "September", "October", "November", "December",
)

# Conventional feed columns
HEADLINE = "Headline"
SUMMARY = "Summary"
URL = "URL"
PUBLISHED_TIME = "Published Time"
TICKERS = "Tickers"
IMAGE_URL = "Image URL"

SUMMARY_MAX_CHARS = 300
PLACEHOLDER_URL = "#"
DEFAULT_SCHEME = "https://"

DEFAULT_REFRESH_INTERVAL_SECONDS = 300.0  # 5 minutes
DEFAULT_REQUEST_TIMEOUT_SECONDS = 20.0
