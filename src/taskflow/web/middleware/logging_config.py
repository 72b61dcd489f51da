"""structlog 配置模块

dev 模式：pretty print 可读输出
json 模式：结构化 JSON 输出

远程模式下的凭据（public key / Authorization 头）在渲染前统一脱敏。
"""

import logging
import os

import structlog

# 日志中需要脱敏的字段名（小写比较）
SECRET_KEYS = frozenset({"public_key", "authorization", "api_key", "token"})
REDACTED = "***"

# 第三方库日志降噪（仅保留 WARNING 及以上）
NOISY_LOGGERS = ("httpx", "httpcore", "aiosqlite")


def redact_secrets(
    logger: object, method_name: str, event_dict: structlog.types.EventDict
) -> structlog.types.EventDict:
    """将凭据字段替换为 ***"""
    for key in event_dict:
        if key.lower() in SECRET_KEYS and event_dict[key]:
            event_dict[key] = REDACTED
    return event_dict


def setup_logging(log_format: str | None = None, log_level: str | None = None) -> None:
    """初始化 structlog 配置

    Args:
        log_format: "json"（生产环境）或 "dev"（默认）；缺省读取 TASKFLOW_LOG_FORMAT
        log_level: 日志级别；缺省读取 TASKFLOW_LOG_LEVEL（默认 INFO）
    """
    log_format = log_format or os.environ.get("TASKFLOW_LOG_FORMAT", "dev")
    log_level = log_level or os.environ.get("TASKFLOW_LOG_LEVEL", "INFO")

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_logger_name,
        structlog.stdlib.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_secrets,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.UnicodeDecoder(),
    ]

    if log_format == "json":
        renderer = structlog.processors.JSONRenderer(ensure_ascii=False)
    else:
        renderer = structlog.dev.ConsoleRenderer()

    structlog.configure(
        processors=[
            *shared_processors,
            structlog.stdlib.ProcessorFormatter.wrap_for_formatter,
        ],
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )

    formatter = structlog.stdlib.ProcessorFormatter(
        processor=renderer,
        foreign_pre_chain=shared_processors,
    )

    handler = logging.StreamHandler()
    handler.setFormatter(formatter)

    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    root_logger.addHandler(handler)
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)
