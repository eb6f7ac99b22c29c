"""
配置工具模块
处理配置路径计算等工具方法
"""

from pathlib import Path


def get_project_root() -> Path:
    """获取项目根目录路径"""
    return Path(__file__).parent.parent.parent


def get_workspace_path(sub_path: str = "") -> Path:
    """获取workspace目录路径"""
    workspace_dir = get_project_root() / "workspace"
    if sub_path:
        return workspace_dir / sub_path
    return workspace_dir


def get_config_path(sub_path: str = "") -> Path:
    """获取config目录路径"""
    config_dir = get_project_root() / "config"
    if sub_path:
        return config_dir / sub_path
    return config_dir


def resolve_workspace_path(value: str) -> Path:
    """
    解析配置中的路径

    绝对路径原样返回，相对路径视为相对workspace目录
    """
    path = Path(value).expanduser()
    if path.is_absolute():
        return path
    return get_workspace_path(value)
