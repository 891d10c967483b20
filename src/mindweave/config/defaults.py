"""Default configuration values for mindweave."""

DEFAULT_CONFIG = {
    "history": {
        "capacity": 10,
    },
    "tuning": {
        "reader_role": "General Audience",
        "ai_persona": "Helpful Assistant",
        "detail_level": "Standard",
    },
    "settings": {
        "review_prompts": True,
        "auto_save": False,
    },
    "server": {
        "host": "127.0.0.1",
        "port": 5055,
    },
}
