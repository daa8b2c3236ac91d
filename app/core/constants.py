"""Core constants: cache key prefixes and shared literal values.

Single source of truth for cache key structure and mutex resource keys
(DRY). Used by app.infrastructure.cache.keys and the application services.
"""

# Cache key prefixes. The segment before the first separator is the tag
# used for pattern invalidation (e.g. "items:all:p1" -> "items").
CACHE_PREFIX_ITEM = "item"
CACHE_PREFIX_ITEMS = "items"
CACHE_PREFIX_ORDER = "order"
CACHE_PREFIX_ORDERS = "orders"

# Delimiter for composite keys
CACHE_KEY_SEP = ":"

# Trailing marker on invalidation patterns ("items:all*"); prefix match only.
CACHE_WILDCARD = "*"

# Physical key suffix: "<logical key>:v<version>"
CACHE_VERSION_MARKER = "v"

# Mutex resource keys for collection-level reads
MUTEX_ITEMS_READ = "items:read"
MUTEX_ORDERS_READ = "orders:read"

# Catalog rules
ALLOWED_CURRENCIES = ("USD", "EUR", "GBP", "INR")
MAX_PAGE_SIZE = 100
MAX_IMAGE_SIZE = 5 * 1024 * 1024  # 5 MB
ALLOWED_IMAGE_TYPES = (
    "image/jpeg",
    "image/jpg",
    "image/png",
    "image/gif",
    "image/webp",
)

# Order number: PREFIX-YYYYMMDD-NNNN (sequence widens past 9999)
ORDER_NUMBER_SEP = "-"
ORDER_NUMBER_DATE_FORMAT = "%Y%m%d"
ORDER_NUMBER_MIN_DIGITS = 4
