MAX_SNOWFLAKE = 2 ** 64 - 1


def parse_snowflake(value: str) -> int:
    """Parse decimal snowflake text, raising ValueError outside the unsigned 64-bit range."""
    if not value or not value.isascii() or not value.isdigit():
        raise ValueError(f"Invalid snowflake: {value!r}")
    snowflake = int(value)
    if snowflake > MAX_SNOWFLAKE:
        raise ValueError(f"Snowflake out of range: {value}")
    return snowflake
