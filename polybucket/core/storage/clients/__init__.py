"""
厂商客户端封装模块
"""

from polybucket.core.storage.clients.obs_client import ObsClientError, ObsClientWrapper

__all__ = [
    'ObsClientError',
    'ObsClientWrapper',
]
