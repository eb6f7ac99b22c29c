"""
PolyBucket
统一的对象存储抽象，支持本地文件系统、AWS S3、华为云OBS
"""

from polybucket.core.storage import (
    BaseStorage,
    StorageError,
    StorageFileNotFoundError,
    StorageOptions,
    StorageProvider,
    get_storage_service,
)

__version__ = "1.0.0"

__all__ = [
    "BaseStorage",
    "StorageError",
    "StorageFileNotFoundError",
    "StorageOptions",
    "StorageProvider",
    "get_storage_service",
]
