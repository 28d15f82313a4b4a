"""
Video processing progress calculation utilities.
"""


def calculate_progress(original_count: int, ascii_count: int) -> int:
    """
    Calculate conversion progress from extracted and converted frame counts.

    Args:
        original_count: Number of frame images extracted from the video
        ascii_count: Number of those frames already rendered as ASCII text

    Returns:
        Progress percentage (0-100). Returns 0 while no frame has been extracted.

    Examples:
        >>> calculate_progress(0, 5)
        0
        >>> calculate_progress(200, 50)
        25
        >>> calculate_progress(3, 2)
        67
        >>> calculate_progress(10, 12)
        100
    """
    if original_count <= 0:
        return 0
    progress = round(max(ascii_count, 0) / original_count * 100)
    return max(0, min(100, progress))


def is_processing_complete(original_count: int, ascii_count: int) -> bool:
    """
    Conversion is complete once every extracted frame has an ASCII rendering.

    Examples:
        >>> is_processing_complete(0, 0)
        False
        >>> is_processing_complete(120, 120)
        True
        >>> is_processing_complete(120, 119)
        False
    """
    return ascii_count > 0 and ascii_count == original_count


def get_status_message(original_count: int, ascii_count: int) -> str:
    """
    Get user-facing message for the current processing step.

    Examples:
        >>> get_status_message(0, 0)
        'Extracting frames...'
        >>> get_status_message(40, 10)
        'Converting to ASCII... (10/40)'
        >>> get_status_message(40, 40)
        'Complete!'
    """
    if original_count == 0:
        return "Extracting frames..."
    if is_processing_complete(original_count, ascii_count) or calculate_progress(original_count, ascii_count) >= 100:
        return "Complete!"
    return f"Converting to ASCII... ({ascii_count}/{original_count})"
