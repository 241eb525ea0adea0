"""
API response envelope
"""
from dataclasses import dataclass
from typing import Any, Optional


@dataclass
class ApiResponse:
    """
    The `{success, data, count?, error?}` envelope the backend wraps every
    payload in.

    Some deployments answer with the bare payload instead; `parse` treats
    anything that is not a dict carrying `data` or `success` as the payload
    itself so callers always get one shape back.
    """
    success: bool
    data: Any = None
    count: Optional[int] = None
    error: Optional[str] = None
    wrapped: bool = True

    @classmethod
    def parse(cls, body: Any) -> 'ApiResponse':
        if isinstance(body, dict) and ('data' in body or 'success' in body):
            return cls(
                success=body.get('success', True) is not False,
                data=body.get('data'),
                count=body.get('count'),
                error=body.get('error'),
            )
        return cls(success=True, data=body, wrapped=False)
