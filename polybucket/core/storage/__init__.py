"""
存储服务模块
提供统一的对象存储访问接口，支持本地文件系统、AWS S3、华为云OBS
"""

from typing import Any, Optional

from polybucket.core.storage.adapters import (
    LocalStorageAdapter,
    ObsStorageAdapter,
    S3StorageAdapter,
)
from polybucket.core.storage.base_storage import BaseStorage
from polybucket.core.storage.clients import ObsClientError, ObsClientWrapper
from polybucket.core.storage.exceptions import *
from polybucket.core.storage.factory import (
    create_adapter,
    get_adapter_class,
    get_storage_options,
    list_available_adapters,
    register_adapter,
)
from polybucket.core.storage.models import *

# 注册内置适配器
register_adapter(LocalStorageAdapter.PROVIDER, LocalStorageAdapter)
register_adapter(S3StorageAdapter.PROVIDER, S3StorageAdapter)
register_adapter(ObsStorageAdapter.PROVIDER, ObsStorageAdapter)


def get_storage_service(
    options: Optional[StorageOptions] = None,
    client: Optional[Any] = None
) -> BaseStorage:
    """
    获取存储服务实例

    Args:
        options: 存储配置，不指定则从全局配置构建
        client: 预先创建的厂商客户端（可选）

    Returns:
        BaseStorage: 存储服务实例

    Raises:
        ConfigurationError: 存储提供商无法识别、未实现或客户端创建失败时抛出

    Example:
        >>> storage = get_storage_service()
        >>> async with storage:
        ...     await storage.upload("docs", "a.txt", b"hello")
    """
    if options is None:
        options = get_storage_options()
    return create_adapter(options, client=client)


__all__ = [
    # 工厂函数
    'get_storage_service',
    'create_adapter',
    'get_adapter_class',
    'get_storage_options',
    'list_available_adapters',
    'register_adapter',
    # 抽象接口
    'BaseStorage',
    # 适配器类
    'LocalStorageAdapter',
    'S3StorageAdapter',
    'ObsStorageAdapter',
    # 厂商客户端封装
    'ObsClientWrapper',
    'ObsClientError',
    # 数据模型
    'StorageOptions',
    'StorageProvider',
    # 异常
    'StorageError',
    'StorageFileNotFoundError',
    'ConfigurationError',
    'InvalidArgumentError',
]
