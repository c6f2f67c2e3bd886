"""Byte size formatting.

Kept dependency-free so it can be unit-tested without importing the app.
"""

import math

SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]


def format_size(num_bytes: int | float) -> str:
    """Format a byte count with 1024-based units and two decimals.

    Examples:
        0 -> "0 B"
        1536 -> "1.50 KB"
        1073741824 -> "1.00 GB"

    Sizes beyond the largest unit stay expressed in TB.
    """
    if not num_bytes or num_bytes <= 0:
        return "0 B"

    exponent = int(math.floor(math.log(num_bytes, 1024)))
    exponent = max(0, min(exponent, len(SIZE_UNITS) - 1))

    # log() can land just either side of an exact power of 1024
    if exponent + 1 < len(SIZE_UNITS) and num_bytes >= 1024 ** (exponent + 1):
        exponent += 1
    elif exponent > 0 and num_bytes < 1024 ** exponent:
        exponent -= 1

    return f"{num_bytes / 1024 ** exponent:.2f} {SIZE_UNITS[exponent]}"
