"""
存储适配器模块
提供本地文件系统、AWS S3、华为云OBS的适配器实现
"""

from polybucket.core.storage.adapters.aws_s3 import S3StorageAdapter
from polybucket.core.storage.adapters.huawei_obs import ObsStorageAdapter
from polybucket.core.storage.adapters.local import LocalStorageAdapter

__all__ = [
    'LocalStorageAdapter',
    'ObsStorageAdapter',
    'S3StorageAdapter',
]
