"""
Logging helpers.

Model replies, questions and review issues are logged as bounded one-line
previews so a long draft never floods the log stream.

Dependencies: logging (stdlib)
System role: Logging helper functions
"""


def preview(text: str | None, max_length: int = 100) -> str:
    """
    Single-line preview of free text.

    Whitespace runs (newlines included) collapse to one space; text longer
    than max_length is cut and tagged with its full length.

    Usage:
        logger.debug(f"Raw reply: {preview(reply, 200)}")
    """
    if not text:
        return ""
    flat = " ".join(str(text).split())
    if len(flat) <= max_length:
        return flat
    return f"{flat[:max_length]}... ({len(flat)} chars)"
