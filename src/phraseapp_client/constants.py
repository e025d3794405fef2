# phraseapp_client/constants.py
"""Constants shared across the phraseapp_client package."""

from . import __version__

DEFAULT_BASE_URL = "https://api.phraseapp.com/api/v2"
DEFAULT_USER_AGENT = f"phraseapp-client/{__version__}"

JSON_CONTENT_TYPE = "application/json"

LINK_RELATIONS = ("first", "prev", "next", "last")
"""Relations kept from a `Link` header, in LinkSet field order."""

RATE_LIMIT_LIMIT_HEADER = "X-Rate-Limit-Limit"
RATE_LIMIT_REMAINING_HEADER = "X-Rate-Limit-Remaining"
RATE_LIMIT_RESET_HEADER = "X-Rate-Limit-Reset"
