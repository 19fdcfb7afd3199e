POINTS_PER_INCH = 72.0
MM_PER_INCH = 25.4


def mm_to_points(mm_value: float) -> float:
    """Converts a value from millimeters to PDF points."""
    return mm_value * POINTS_PER_INCH / MM_PER_INCH


def points_to_mm(points_value: float) -> float:
    """Converts a value from PDF points to millimeters."""
    return points_value * MM_PER_INCH / POINTS_PER_INCH
