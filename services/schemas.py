# services/schemas.py
# Item shapes for persisted lists. Unknown extra fields are tolerated.

FAVORITE_SCHEMA = {"type": "string", "minLength": 1}

HISTORY_ENTRY_SCHEMA = {
    "type": "object",
    "required": ["v", "from", "to"],
    "properties": {
        "v": {"type": ["string", "number"]},
        "from": {"type": "string", "minLength": 1},
        "to": {"type": "string", "minLength": 1},
        "ts": {"type": "number"},
    },
}

TIMER_SCHEMA = {
    "type": "object",
    "required": ["id", "targetTime"],
    "properties": {
        "id": {"type": "string", "minLength": 1},
        "targetTime": {"type": "string", "minLength": 1},
        "createdAt": {"type": "string"},
        "title": {"type": ["string", "null"]},
        "description": {"type": ["string", "null"]},
        "soundEnabled": {"type": ["boolean", "null"]},
    },
}
