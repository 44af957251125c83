from typing import Any, Optional
from pydantic import BaseModel

class ResponseModel(BaseModel):
    """JSON envelope used for error bodies."""
    code: int = 200
    message: str = "success"
    data: Optional[Any] = None

    @staticmethod
    def fail(code: int = 400, message: str = "error", data: Any = None):
        return {"code": code, "message": message, "data": data}
