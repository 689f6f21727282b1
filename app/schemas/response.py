from pydantic import BaseModel, ConfigDict
from typing import Any, Dict, Optional


class APIBody(BaseModel):
    message: str
    error: Optional[str] = None

    # Endpoints may add fields (tokens, account id) next to the message
    model_config = ConfigDict(extra="allow")


class APIResponse(BaseModel):
    success: bool
    code: int
    data: APIBody


def envelope(code: int, message: str, error: Optional[str] = None, **extra: Any) -> Dict[str, Any]:
    """Build the uniform response envelope used by every endpoint."""
    data: Dict[str, Any] = {"message": message}
    if error is not None:
        data["error"] = error
    data.update({key: value for key, value in extra.items() if value is not None})
    return {
        "success": 200 <= code < 400,
        "code": code,
        "data": data,
    }
