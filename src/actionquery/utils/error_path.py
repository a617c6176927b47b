"""Get the source location of an error."""

import traceback

__all__ = ["get_error_path"]


def get_error_path(err: Exception) -> str:
    """Extract formatted source location from an exception traceback.

    Args:
        err: The raised exception.

    Returns:
        "filename:line (fn:function_name)" of the innermost frame, with paths
        inside the package shortened to start at ``actionquery``.
    """
    frames = traceback.extract_tb(err.__traceback__)
    if not frames:
        return "unknown"

    filename, line, func, _ = frames[-1]
    if "actionquery" in filename:
        filename = "actionquery" + filename.split("actionquery")[-1]
    return f"{filename}:{line} (fn:{func})"
