"""统一错误响应

错误体格式：{"error": {"code": ..., "message": ...}}
"""

from starlette.responses import JSONResponse
from taskflow.core.exceptions import (
    TaskFlowError,
    TaskNotFoundError,
    TaskValidationError,
)

NOT_FOUND_MESSAGE = "The page you're looking for doesn't exist or has been moved."


def error_response(status_code: int, code: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={
            "error": {
                "code": code,
                "message": message,
            }
        },
    )


def task_error_response(error: TaskFlowError) -> JSONResponse:
    """TaskFlowError -> HTTP 错误响应

    - TaskValidationError: 422
    - TaskNotFoundError: 404
    - 其他（TaskServiceError）: 502
    """
    if isinstance(error, TaskValidationError):
        return error_response(422, "TASK_VALIDATION_FAILED", str(error))
    if isinstance(error, TaskNotFoundError):
        return error_response(404, "TASK_NOT_FOUND", str(error))
    return error_response(502, "TASK_SERVICE_ERROR", str(error))
