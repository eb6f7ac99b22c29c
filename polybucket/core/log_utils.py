"""
统一日志管理模块
提供标准化的结构化日志记录功能
"""

import logging
import sys
from pathlib import Path
from typing import Optional, Dict, Any

from polybucket.core.config import settings
from polybucket.core.log_messages import log_messages


class UnifiedLogger:
    """统一的业务日志记录器，提供结构化日志记录功能"""

    def __init__(self, name: str):
        """初始化日志记录器"""
        self.logger = logging.getLogger(name)
        self.name = name

    def _format_extra_data(self, **kwargs: Any) -> Dict[str, Any]:
        """格式化日志额外数据"""
        return log_messages.get_structured_data(
            log_module=self.name,
            **kwargs
        )

    def _format_message(self, message_template: str, **kwargs: Any) -> str:
        """
        格式化日志消息

        只有提供了格式化参数时才进行格式化，避免对已格式化的字符串（可能包含花括号）二次格式化
        """
        if not kwargs:
            return message_template
        try:
            return log_messages.format_message(message_template, **kwargs)
        except (KeyError, ValueError, IndexError):
            return message_template

    def info(self, message_template: str, **kwargs: Any) -> None:
        """
        记录信息级别日志

        Args:
            message_template: 日志消息，可以是格式化模板或已格式化的字符串
            **kwargs: 格式化参数（可选），同时作为结构化字段记录

        示例:
            logger.info("简单消息")
            logger.info(log_messages.OBJECT_UPLOAD_SUCCESS, bucket="docs", key="a.txt")
        """
        message = self._format_message(message_template, **kwargs)
        self.logger.info(message, extra=self._format_extra_data(**kwargs))

    def warning(self, message_template: str, **kwargs: Any) -> None:
        """
        记录警告级别日志

        Args:
            message_template: 日志消息，可以是格式化模板或已格式化的字符串
            **kwargs: 格式化参数（可选）
        """
        message = self._format_message(message_template, **kwargs)
        self.logger.warning(message, extra=self._format_extra_data(**kwargs))

    def error(self, message_template: str, exception: Optional[BaseException] = None, **kwargs: Any) -> None:
        """
        记录错误级别日志

        Args:
            message_template: 日志消息，可以是格式化模板或已格式化的字符串
            exception: 异常对象（可选）
            **kwargs: 格式化参数（可选）
        """
        message = self._format_message(message_template, **kwargs)
        extra_data = self._format_extra_data(**kwargs)

        if exception:
            extra_data.update({
                "exception_type": type(exception).__name__,
                "exception_message": str(exception)
            })
            self.logger.error(message, extra=extra_data, exc_info=exception)
        else:
            self.logger.error(message, extra=extra_data)

    def debug(self, message_template: str, **kwargs: Any) -> None:
        """记录调试级别日志，仅在调试模式下输出"""
        if settings.app_debug:
            message = self._format_message(message_template, **kwargs)
            self.logger.debug(message, extra=self._format_extra_data(**kwargs))


# 全局日志实例缓存
_loggers_cache: Dict[str, UnifiedLogger] = {}


def get_logger(name: str = __name__) -> UnifiedLogger:
    """
    获取统一的业务日志记录器

    Args:
        name: 日志记录器名称，默认为当前模块名

    Returns:
        UnifiedLogger实例
    """
    if name not in _loggers_cache:
        _loggers_cache[name] = UnifiedLogger(name)
    return _loggers_cache[name]


def setup_logging(log_to_file: bool = True) -> None:
    """
    配置全局日志系统

    Args:
        log_to_file: 是否同时写入workspace下的日志文件
    """
    root_logger = logging.getLogger()
    log_level = logging.DEBUG if settings.app_debug else getattr(logging, settings.log_level, logging.INFO)
    root_logger.setLevel(log_level)

    # 清除现有的处理器
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    formatter = logging.Formatter(settings.log_format)

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(log_level)
    console_handler.setFormatter(formatter)
    root_logger.addHandler(console_handler)

    if log_to_file:
        log_file_path = Path(settings.absolute_log_file)
        log_file_path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        file_handler.setLevel(logging.INFO)
        file_handler.setFormatter(formatter)
        root_logger.addHandler(file_handler)

    # 设置第三方SDK的日志级别
    third_party_loggers = ["boto3", "botocore", "urllib3", "s3transfer", "obs"]
    for logger_name in third_party_loggers:
        logging.getLogger(logger_name).setLevel(logging.WARNING)

    config_logger = get_logger(__name__)
    config_logger.info(log_messages.OPERATION_SUCCESS, operation_name="日志系统配置")

