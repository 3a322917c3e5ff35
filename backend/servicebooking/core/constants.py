"""Application-wide constants for the service booking platform."""

BRAND_NAME = "ServiceBooking"
API_VERSION = "1.0.0"

# Pagination
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 50

# Text constraints
MAX_NAME_LENGTH = 100
MAX_DESCRIPTION_LENGTH = 300
MIN_PASSWORD_LENGTH = 6
MAX_PASSWORD_LENGTH = 100

# Header carrying pagination metadata on list responses
PAGINATION_HEADER = "X-Pagination"
