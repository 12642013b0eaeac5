# =============================================================================
# Extraction Configuration
# =============================================================================

DEFAULT_LAYOUT = "CEMIG"
CLIENT_NUMBER_DIGITS = 10  # CEMIG client numbers are exactly 10 digits

EXTRACTION_METHOD = "regex"
EXTRACTION_CONFIDENCE = 1.0  # Constant; no probabilistic scoring

# =============================================================================
# Cache Configuration
# =============================================================================

PDF_CACHE_KEY_PREFIX = "pdf:"
PDF_CACHE_TTL_SECONDS = 3600  # 1 hour
MEMORY_CACHE_MAX_ITEMS = 1000  # In-process first-level entries

DASHBOARD_CACHE_KEY_PREFIX = "dashboard:"
DASHBOARD_CACHE_TTL_SECONDS = 1800  # 30 min

# =============================================================================
# Retry Configuration
# =============================================================================

MAX_RETRIES = 3
INITIAL_BACKOFF = 0.5  # seconds
BACKOFF_MULTIPLIER = 2  # Exponential backoff multiplier for retries

JOB_MAX_ATTEMPTS = 3
JOB_BACKOFF_SECONDS = 1.0

# =============================================================================
# Validation Limits
# =============================================================================

# File upload
PDF_MAX_SIZE_BYTES = 5 * 1024 * 1024  # 5MB
ALLOWED_CONTENT_TYPES = frozenset({"application/pdf"})

# Listing
DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

# Object names
OBJECT_NAME_MAX_LENGTH = 1024

# =============================================================================
# Logging
# =============================================================================

LOG_TEXT_PREVIEW_CHARS = 500  # Chars of extracted PDF text written to debug logs
