"""
HTTP errors that carry a machine-readable code next to the message.
"""

from typing import Dict, Optional

from fastapi import HTTPException


class CodedHTTPException(HTTPException):
    """HTTPException whose response body also includes `code`."""

    def __init__(
        self,
        status_code: int,
        detail: str,
        code: str,
        headers: Optional[Dict[str, str]] = None,
    ):
        super().__init__(status_code=status_code, detail=detail, headers=headers)
        self.code = code
