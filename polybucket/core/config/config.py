"""
应用配置管理模块
统一管理所有配置信息，包括环境变量和文件配置
"""

from typing import Optional

from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from polybucket.utils.config_utils import get_config_path, get_workspace_path


class Settings(BaseSettings):
    """应用配置类 - 统一管理所有配置信息"""

    # ==================== 基础配置 ====================
    app_name: str = "PolyBucket"
    app_version: str = "1.0.0"
    app_debug: bool = False
    app_env: str = "development"

    # ==================== 对象存储配置 ====================
    # 可选值: local | aws_s3 | huawei_obs
    storage_provider: str = "local"
    storage_access_key: str = ""
    storage_secret_key: str = ""
    storage_endpoint: Optional[str] = None
    storage_region: Optional[str] = None

    storage_timeout_seconds: int = 30
    storage_max_retries: int = 3
    storage_force_path_style: bool = True

    storage_local_path: str = "storage"
    storage_create_bucket_if_not_exists: bool = True

    # ==================== 日志配置 ====================
    log_level: str = "INFO"
    log_dir: str = "log"
    log_file: str = "polybucket.log"
    log_format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

    # ==================== 验证器 ====================
    @field_validator("storage_provider")
    @classmethod
    def normalize_storage_provider(cls, value: str) -> str:
        """统一存储提供商名称的大小写"""
        return value.strip().lower()

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, value: str) -> str:
        """统一日志级别的大小写"""
        return value.strip().upper()

    # ==================== 计算属性 ====================
    @property
    def workspace_dir(self) -> str:
        """获取workspace目录路径"""
        return str(get_workspace_path())

    @property
    def absolute_log_dir(self) -> str:
        """获取绝对日志目录路径"""
        return str(get_workspace_path(self.log_dir))

    @property
    def absolute_log_file(self) -> str:
        """获取绝对日志文件路径"""
        return str(get_workspace_path(self.log_dir) / self.log_file)

    @property
    def cloud_credentials_configured(self) -> bool:
        """检查云存储凭证是否已配置"""
        return bool(self.storage_access_key and self.storage_secret_key)

    model_config = SettingsConfigDict(
        env_file=get_config_path(".env"),
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
        validate_default=True
    )


def get_settings() -> Settings:
    """获取应用配置实例"""
    return Settings()


# 全局配置实例
settings = get_settings()
