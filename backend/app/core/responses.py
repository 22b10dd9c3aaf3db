import math
from typing import Any, Optional

from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse

from app.core.errors import ErrorCode


def pagination_meta(page: int, limit: int, total: int) -> dict:
    return {
        "page": page,
        "limit": limit,
        "total": total,
        "totalPages": math.ceil(total / limit) if total else 0,
    }


def success(message: str, data: Any = None, meta: Optional[dict] = None, status_code: int = 200) -> JSONResponse:
    content = {"success": True, "message": message, "data": jsonable_encoder(data)}
    if meta is not None:
        content["meta"] = meta
    return JSONResponse(status_code=status_code, content=content)


def error(
    message: str,
    status_code: int = 500,
    error_code: str = ErrorCode.INTERNAL_ERROR,
    details: Any = None,
) -> JSONResponse:
    body = {"code": error_code}
    if details is not None:
        body["details"] = jsonable_encoder(details)
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "message": message, "error": body},
    )
