"""
存储服务数据模型
定义存储提供商枚举和存储配置
"""

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from polybucket.utils.config_utils import get_workspace_path


class StorageProvider(str, Enum):
    """存储提供商"""

    AWS_S3 = "aws_s3"
    HUAWEI_OBS = "huawei_obs"
    # 保留的配置值，暂无对应适配器
    DIGITAL_OCEAN = "digital_ocean"
    LOCAL = "local"


class StorageOptions(BaseModel):
    """
    对象存储配置

    进程启动时构建一次，构建后不可修改，以引用方式传入适配器工厂。
    """

    model_config = ConfigDict(frozen=True)

    provider: StorageProvider = Field(default=StorageProvider.LOCAL, description="存储提供商")
    access_key: str = Field(default="", description="访问密钥ID")
    secret_key: str = Field(default="", description="访问密钥")
    endpoint: Optional[str] = Field(default=None, description="服务端点URL")
    region: Optional[str] = Field(default=None, description="区域")

    timeout_seconds: int = Field(default=30, gt=0, description="请求超时时间（秒）")
    max_retries: int = Field(default=3, ge=0, description="厂商客户端的最大重试次数")
    force_path_style: bool = Field(default=True, description="S3兼容服务是否使用路径风格寻址")

    local_storage_path: str = Field(
        default_factory=lambda: str(get_workspace_path("storage")),
        description="本地存储根目录"
    )
    create_bucket_if_not_exists: bool = Field(default=True, description="上传时存储桶不存在是否自动创建")


__all__ = [
    'StorageProvider',
    'StorageOptions',
]
