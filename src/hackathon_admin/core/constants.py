"""Constants and defaults."""

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100
DEFAULT_ADMIN_TOKEN_MAX_AGE = 24 * 60 * 60
QR_PREFIX = "HACKATHON"
ALLOWED_IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".gif", ".webp"}
