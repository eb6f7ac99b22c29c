"""
通用工具模块
"""

from polybucket.utils.config_utils import (
    get_config_path,
    get_project_root,
    get_workspace_path,
    resolve_workspace_path,
)

__all__ = [
    "get_config_path",
    "get_project_root",
    "get_workspace_path",
    "resolve_workspace_path",
]
