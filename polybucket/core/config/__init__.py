"""
配置模块
包含应用所有配置信息和工具
"""

from polybucket.core.config.config import Settings, settings, get_settings

__all__ = ["Settings", "settings", "get_settings"]
