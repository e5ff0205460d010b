"""Constants used across the application."""

from enum import Enum


# Database connection retry policy (fixed delay, no backoff growth)
MAX_CONNECT_ATTEMPTS = 5
CONNECT_RETRY_DELAY = 5.0

# Per-attempt driver timeouts (milliseconds)
MONGO_TIMEOUTS = {
    "serverSelectionTimeoutMS": 5000,
    "connectTimeoutMS": 10000,
    "socketTimeoutMS": 45000,
}

# Server error code for "collection already exists"
NAMESPACE_EXISTS_CODE = 48

# Multipart form fields
TEXT_FIELDS = ("name", "email", "interests")
IMAGE_FIELD = "profileImage"

UPLOADS_URL_PREFIX = "/uploads"


class SaveStatus(str, Enum):
    SAVED = "Saved to MongoDB"
    NOT_CONNECTED = "MongoDB not connected"
