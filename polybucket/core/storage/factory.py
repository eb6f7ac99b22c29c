"""
存储适配器工厂
根据配置的存储提供商注册和创建适配器
"""

from typing import Any, Dict, List, Optional, Type, Union

from polybucket.core.config import settings
from polybucket.core.log_messages import log_messages
from polybucket.core.log_utils import get_logger
from polybucket.core.storage.base_storage import BaseStorage
from polybucket.core.storage.exceptions import ConfigurationError
from polybucket.core.storage.models import StorageOptions, StorageProvider
from polybucket.utils.config_utils import resolve_workspace_path

logger = get_logger(__name__)

# 适配器注册表
_adapter_registry: Dict[StorageProvider, Type[BaseStorage]] = {}


def _to_provider(provider: Union[StorageProvider, str]) -> StorageProvider:
    """
    将配置值转换为存储提供商枚举

    Raises:
        ConfigurationError: 无法识别的提供商
    """
    if isinstance(provider, StorageProvider):
        return provider
    try:
        return StorageProvider(str(provider).strip().lower())
    except ValueError as e:
        available = ', '.join(p.value for p in StorageProvider)
        raise ConfigurationError(
            "无法识别的存储提供商 '{}'，可选值: {}".format(provider, available)
        ) from e


def register_adapter(provider: Union[StorageProvider, str], adapter_class: Type[BaseStorage]) -> None:
    """
    注册存储适配器

    Args:
        provider: 存储提供商（如 'local', 'aws_s3', 'huawei_obs'）
        adapter_class: 适配器类

    Example:
        >>> register_adapter(StorageProvider.AWS_S3, S3StorageAdapter)
    """
    provider = _to_provider(provider)
    _adapter_registry[provider] = adapter_class
    logger.debug(log_messages.ADAPTER_REGISTERED, provider=provider.value)


def get_adapter_class(provider: Union[StorageProvider, str]) -> Type[BaseStorage]:
    """
    获取适配器类

    Args:
        provider: 存储提供商

    Returns:
        Type[BaseStorage]: 适配器类

    Raises:
        ConfigurationError: 提供商无法识别或没有对应的适配器时抛出
    """
    provider = _to_provider(provider)
    adapter_class = _adapter_registry.get(provider)
    if not adapter_class:
        available = ', '.join(p.value for p in _adapter_registry)
        raise ConfigurationError(
            "存储提供商 '{}' 没有可用的适配器，可用适配器: {}".format(provider.value, available)
        )
    return adapter_class


def create_adapter(options: StorageOptions, client: Optional[Any] = None) -> BaseStorage:
    """
    创建适配器实例

    Args:
        options: 存储配置
        client: 预先创建的厂商客户端，不传则由适配器根据配置创建

    Returns:
        BaseStorage: 适配器实例

    Raises:
        ConfigurationError: 适配器不存在或创建失败时抛出
    """
    adapter_class = get_adapter_class(options.provider)
    try:
        adapter = adapter_class(options, client=client)
    except ConfigurationError:
        logger.error(log_messages.ADAPTER_CREATE_FAILED, provider=options.provider.value)
        raise
    except Exception as e:
        logger.error(log_messages.ADAPTER_CREATE_FAILED, exception=e, provider=options.provider.value)
        raise ConfigurationError(
            "创建存储适配器 '{}' 失败: {}".format(options.provider.value, str(e))
        ) from e

    logger.info(log_messages.ADAPTER_CREATED, provider=options.provider.value)
    return adapter


def list_available_adapters() -> List[str]:
    """
    列出所有已注册的适配器

    Returns:
        List[str]: 存储提供商名称列表
    """
    return [provider.value for provider in _adapter_registry]


def get_storage_options() -> StorageOptions:
    """
    从全局配置构建存储配置

    Raises:
        ConfigurationError: 配置值无效时抛出
    """
    provider = _to_provider(settings.storage_provider)
    try:
        return StorageOptions(
            provider=provider,
            access_key=settings.storage_access_key,
            secret_key=settings.storage_secret_key,
            endpoint=settings.storage_endpoint,
            region=settings.storage_region,
            timeout_seconds=settings.storage_timeout_seconds,
            max_retries=settings.storage_max_retries,
            force_path_style=settings.storage_force_path_style,
            local_storage_path=str(resolve_workspace_path(settings.storage_local_path)),
            create_bucket_if_not_exists=settings.storage_create_bucket_if_not_exists,
        )
    except ValueError as e:
        raise ConfigurationError("存储配置无效: {}".format(str(e))) from e


__all__ = [
    'register_adapter',
    'get_adapter_class',
    'create_adapter',
    'list_available_adapters',
    'get_storage_options',
]
