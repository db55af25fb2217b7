"""JSON schemas for Secret Rotator configuration and requests."""

CONFIG_SCHEMA = {
    "type": "object",
    "properties": {
        "store": {
            "type": "object",
            "properties": {
                "region": {
                    "type": ["string", "null"],
                    "description": "AWS region of the secret store",
                },
                "endpoint_url": {
                    "type": ["string", "null"],
                    "pattern": r"^https?://",
                    "description": "Override endpoint, e.g. a local emulator",
                },
                "connect_timeout": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "default": 5,
                },
                "read_timeout": {
                    "type": "number",
                    "exclusiveMinimum": 0,
                    "default": 10,
                },
            },
            "additionalProperties": False,
        },
        "rotation": {
            "type": "object",
            "properties": {
                "deadline_margin_ms": {
                    "type": "integer",
                    "minimum": 0,
                    "default": 500,
                },
            },
            "additionalProperties": False,
        },
        "logging": {
            "type": "object",
            "properties": {
                "verbose": {
                    "type": "boolean",
                    "default": False,
                },
                "log_file": {
                    "type": ["string", "null"],
                },
            },
            "additionalProperties": False,
        },
    },
    "additionalProperties": False,
}

# Only types are checked here; value rules belong to the request validator
ROTATION_REQUEST_SCHEMA = {
    "type": "object",
    "properties": {
        "secret_arn": {"type": "string"},
        "secret_type": {"type": "string"},
        "generator_options": {
            "type": "object",
            "properties": {
                "length": {"type": "integer"},
                "include_lowercase": {"type": "boolean"},
                "include_uppercase": {"type": "boolean"},
                "include_digits": {"type": "boolean"},
                "include_special_chars": {"type": "boolean"},
                "exclude_ambiguous": {"type": "boolean"},
                "min_number_digits": {"type": ["integer", "null"]},
                "min_number_special": {"type": ["integer", "null"]},
            },
        },
        "key_value_config": {
            "type": ["object", "null"],
            "properties": {
                "keys_to_rotate": {
                    "type": ["array", "null"],
                    "items": {"type": "string"},
                },
            },
        },
    },
}
