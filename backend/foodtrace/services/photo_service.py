"""Photo capture: encode an uploaded image as a data URI.

Photos are stored verbatim on inbound items and components. They are
never decoded or resized.
"""

import base64
import mimetypes
from typing import Optional

DEFAULT_CONTENT_TYPE = "application/octet-stream"


def guess_content_type(filename: Optional[str]) -> str:
    if filename:
        guessed, _ = mimetypes.guess_type(filename)
        if guessed:
            return guessed
    return DEFAULT_CONTENT_TYPE


def to_data_uri(
    content: bytes, content_type: Optional[str] = None, filename: Optional[str] = None
) -> str:
    """``data:<type>;base64,<payload>`` for the given bytes."""
    mime = content_type or guess_content_type(filename)
    payload = base64.b64encode(content).decode("ascii")
    return f"data:{mime};base64,{payload}"
