# gallery_media/utils/file_helpers.py
"""
Byte-size helpers shared by models, generators and statistics.
"""

FILE_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def format_file_size(size_bytes: int) -> str:
    """
    Format a byte count for display.

    Args:
        size_bytes: Size in bytes

    Returns:
        Human readable size such as "0 Bytes", "1.5 KB" or "10 MB"
    """
    if size_bytes <= 0:
        return "0 Bytes"

    value = float(size_bytes)
    index = 0
    while value >= 1024 and index < len(FILE_SIZE_UNITS) - 1:
        value /= 1024
        index += 1

    # Drop trailing zeros: 1.50 -> 1.5, 10.00 -> 10
    return f"{round(value, 2):g} {FILE_SIZE_UNITS[index]}"


def calculate_compression_ratio(original_size: int, compressed_size: int) -> float:
    """
    Percentage saved by compression, rounded to one decimal.

    calculate_compression_ratio(1000, 400) == 60.0
    """
    if original_size <= 0:
        return 0.0
    return round((1 - compressed_size / original_size) * 100, 1)
