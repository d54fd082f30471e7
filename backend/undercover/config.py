import os


class Config:
    SECRET_KEY = os.environ.get("SECRET_KEY", "dev")

    # CORS
    CORS_ORIGINS = os.environ.get("CORS_ORIGINS", "*")

    # Reverse proxy / IP headers
    TRUST_PROXY_HEADERS = os.environ.get("TRUST_PROXY_HEADERS", "1") == "1"

    LOG_LEVEL = os.environ.get("LOG_LEVEL", "INFO")

    # Word lists (persisted as a single JSON document)
    WORDLISTS_FILE = os.environ.get(
        "WORDLISTS_FILE",
        os.path.join(os.path.dirname(os.path.abspath(__file__)), "..", "wordlists.json"),
    )
    DEFAULT_LIST_NAME = os.environ.get("DEFAULT_LIST_NAME", "default")
    # Lists whose pairs are always dealt as "civilian word, impostor word".
    FIXED_ORDER_LISTS = [
        n.strip() for n in os.environ.get("FIXED_ORDER_LISTS", "ordered").split(",") if n.strip()
    ]

    # Game
    DISCONNECT_GRACE_SEC = int(os.environ.get("DISCONNECT_GRACE_SEC", "30"))
    PUNISHMENT_ENABLED = os.environ.get("PUNISHMENT_ENABLED", "0") == "1"
    MAX_NAME_LENGTH = int(os.environ.get("MAX_NAME_LENGTH", "16"))
