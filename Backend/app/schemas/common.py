"""
Response envelope shared by every endpoint:
{"success": bool, "data" | "message": ..., "count"?: int}
"""
from typing import Any, Optional


def success_response(
    data: Any = None,
    message: Optional[str] = None,
    count: Optional[int] = None
) -> dict:
    """Build a success envelope, leaving out keys that were not given."""
    body = {"success": True}
    if message is not None:
        body["message"] = message
    if count is not None:
        body["count"] = count
    if data is not None:
        body["data"] = data
    return body


def error_response(message: str) -> dict:
    return {"success": False, "message": message}


def format_validation_errors(errors) -> str:
    """
    Flatten pydantic error dicts into one readable message,
    e.g. "cost: Input should be greater than or equal to 0".
    """
    messages = []
    for error in errors:
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(location)
        message = error.get("msg", "Invalid value")
        messages.append(f"{field}: {message}" if field else message)
    return "; ".join(messages) or "Invalid request"
