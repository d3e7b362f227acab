"""Application constants shared by the auth models and services."""
from enum import Enum

# Sanctum-compatible morph type for user-owned tokens
TOKENABLE_USER = "App\\Models\\User"

DEFAULT_ABILITIES = ("*",)


class CredentialType(str, Enum):
    OPAQUE = "opaque"
    SIGNED = "signed"


def default_additional_info(gender: str = "", food_type: str = "", place_value: str = "") -> dict:
    return {
        "user_detail": {
            "gender": gender,
        },
        "user_preferences": {
            "food_type": food_type,
            "place_value": place_value,
        },
        "user_saved": {
            "saved_places": [],
            "saved_posts": [],
            "saved_articles": [],
        },
        "user_settings": {
            "language": "id",
            "theme": "light",
        },
        "user_notification": {
            "push_notification": True,
        },
    }
