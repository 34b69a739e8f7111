"""Ecommerce constants"""

DISCOUNT_TYPE_PERCENT_OFF = "percent-off"
DISCOUNT_TYPE_DOLLARS_OFF = "dollars-off"
DISCOUNT_TYPES = [DISCOUNT_TYPE_PERCENT_OFF, DISCOUNT_TYPE_DOLLARS_OFF]

PROMO_CODE_MAX_LENGTH = 30
INVALID_PROMO_CODE_MESSAGE = "Invalid promo code"

MAX_BASKET_ITEMS = 50

# Product content kinds are set explicitly on products, never derived from product names
CONTENT_KIND_STANDARD = "standard"
CONTENT_KIND_BLEND_KLOW = "blend_klow"
CONTENT_KIND_BAC_WATER = "bac_water"
CONTENT_KINDS = [CONTENT_KIND_STANDARD, CONTENT_KIND_BLEND_KLOW, CONTENT_KIND_BAC_WATER]

ORDER_STATUS_PENDING = "pending"
ORDER_STATUS_PROCESSING = "processing"
ORDER_STATUS_SHIPPED = "shipped"
ORDER_STATUS_DELIVERED = "delivered"
ORDER_STATUS_CANCELLED = "cancelled"
ORDER_STATUSES = [
    ORDER_STATUS_PENDING,
    ORDER_STATUS_PROCESSING,
    ORDER_STATUS_SHIPPED,
    ORDER_STATUS_DELIVERED,
    ORDER_STATUS_CANCELLED,
]

PROMOTION_NAME_MAX_LENGTH = 100
