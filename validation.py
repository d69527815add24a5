"""
Input validation for values that reach the engine from users
"""
from typing import Optional, Union

from pattern_matching.exceptions import InvalidArgumentError
from logger import get_logger

logger = get_logger(__name__)


def parse_int_field(
    value: Optional[Union[str, int]],
    default: int,
    field: str,
    minimum: Optional[int] = 0
) -> int:
    """
    Parse a numeric form field

    A missing or blank value yields the default.

    Raises:
        InvalidArgumentError: If the value is not an integer or is below minimum
    """
    if value is None or (isinstance(value, str) and not value.strip()):
        return default

    if isinstance(value, bool):
        raise InvalidArgumentError(f"Invalid {field.replace('_', ' ')}: {value!r}", field=field)

    try:
        number = int(value.strip()) if isinstance(value, str) else int(value)
    except (TypeError, ValueError):
        logger.warning(f"Rejected non-numeric {field}: {value!r}")
        raise InvalidArgumentError(f"Invalid {field.replace('_', ' ')}: {value!r}", field=field)

    if minimum is not None and number < minimum:
        raise InvalidArgumentError(
            f"Invalid {field.replace('_', ' ')}: must be at least {minimum}",
            field=field
        )

    return number
