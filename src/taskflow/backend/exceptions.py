"""Backend 异常体系"""


class BackendError(Exception):
    """远端表格服务基础异常（非 2xx 响应、响应体无法解析等）"""

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        recoverable: bool = True,
    ) -> None:
        """
        Args:
            message: 错误描述
            status_code: HTTP 状态码（如有）
            recoverable: 是否可通过重试恢复
        """
        super().__init__(message)
        self.status_code = status_code
        self.recoverable = recoverable


class BackendUnreachableError(BackendError):
    """表格服务不可达（连接失败、超时、DNS 解析失败等）"""

    def __init__(self, endpoint: str, original_error: Exception) -> None:
        """
        Args:
            endpoint: 尝试连接的服务地址
            original_error: 原始异常
        """
        super().__init__(f"Backend unreachable: {endpoint} -- {original_error}")
        self.endpoint = endpoint
        self.original_error = original_error
