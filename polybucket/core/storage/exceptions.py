"""
存储服务异常定义
定义存储模块中使用的所有异常类型
"""

from typing import Any, Dict, Optional


class StorageError(Exception):
    """
    存储操作基础异常

    所有存储相关异常的基类。除"文件不存在"外的所有失败（网络、权限、
    厂商错误码、本地I/O）都以该异常抛出，原始异常保存在 cause 中。

    Attributes:
        message: 错误消息
        code: 错误码
        details: 错误详情
        cause: 原始异常
    """

    def __init__(
        self,
        message: str,
        code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
        cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(message)
        self.message = message
        self.code = code
        self.details = details or {}
        self.cause = cause

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message


class StorageFileNotFoundError(StorageError):
    """请求的对象不存在"""

    def __init__(
        self,
        bucket: str,
        key: str,
        cause: Optional[BaseException] = None
    ) -> None:
        super().__init__(
            "文件 '{}' 在存储桶 '{}' 中不存在".format(key, bucket),
            code="NOT_FOUND",
            details={"bucket": bucket, "key": key},
            cause=cause
        )
        self.bucket = bucket
        self.key = key


class ConfigurationError(StorageError):
    """存储配置错误"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        super().__init__(message, code="CONFIG_ERROR", details=details)


class InvalidArgumentError(ValueError):
    """
    参数校验错误

    在发起任何网络或文件系统访问之前抛出，不属于 StorageError。
    """

    def __init__(self, argument: str, message: str) -> None:
        super().__init__(message)
        self.argument = argument
        self.message = message


__all__ = [
    'StorageError',
    'StorageFileNotFoundError',
    'ConfigurationError',
    'InvalidArgumentError',
]
