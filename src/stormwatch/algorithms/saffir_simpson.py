"""
Saffir-Simpson hurricane wind scale.
"""

from ..core import constants


def saffir_simpson_category(wind_speed_mph: float) -> int:
    """
    Categorize a sustained wind speed on the Saffir-Simpson scale.

    Args:
        wind_speed_mph: Maximum sustained wind in mph

    Returns:
        Category 1-5, or 0 below hurricane strength
    """
    if wind_speed_mph is None:
        return 0
    for category, threshold in constants.SAFFIR_SIMPSON_THRESHOLDS:
        if wind_speed_mph >= threshold:
            return category
    return 0


def classification(wind_speed_mph: float) -> str:
    """
    Describe a storm by its wind speed.

    Args:
        wind_speed_mph: Maximum sustained wind in mph

    Returns:
        'Category N Hurricane', 'Tropical Storm' or 'Tropical Depression'
    """
    category = saffir_simpson_category(wind_speed_mph)
    if category > 0:
        return f"Category {category} Hurricane"
    if wind_speed_mph is not None and wind_speed_mph >= 39:
        return "Tropical Storm"
    return "Tropical Depression"
