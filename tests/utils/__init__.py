"""
测试工具模块
"""

from tests.utils.mock_utils import FakeObsSdkClient, FakeS3Client, make_client_error

__all__ = [
    "FakeObsSdkClient",
    "FakeS3Client",
    "make_client_error",
]
