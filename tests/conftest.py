"""
测试配置和fixtures
为所有存储测试提供共享的配置、适配器和内存版厂商客户端
"""

import pytest

from polybucket.core.storage import (
    LocalStorageAdapter,
    ObsClientWrapper,
    ObsStorageAdapter,
    S3StorageAdapter,
    StorageOptions,
    StorageProvider,
)
from tests.utils.mock_utils import FakeObsSdkClient, FakeS3Client


@pytest.fixture
def local_options(tmp_path):
    """本地存储配置，根目录位于pytest临时目录"""
    return StorageOptions(
        provider=StorageProvider.LOCAL,
        local_storage_path=str(tmp_path / "storage")
    )


@pytest.fixture
def cloud_options():
    """云存储配置"""
    return StorageOptions(
        provider=StorageProvider.AWS_S3,
        access_key="test-access-key",
        secret_key="test-secret-key",
        endpoint="http://localhost:9000",
        region="us-east-1",
        timeout_seconds=30,
        create_bucket_if_not_exists=True
    )


@pytest.fixture
def obs_options(cloud_options):
    """OBS存储配置"""
    return cloud_options.model_copy(update={
        "provider": StorageProvider.HUAWEI_OBS,
        "endpoint": "https://obs.cn-north-4.myhuaweicloud.com",
        "region": "cn-north-4",
    })


@pytest.fixture
def local_storage(local_options):
    """本地存储适配器"""
    return LocalStorageAdapter(local_options)


@pytest.fixture
def fake_s3_client():
    """内存版S3客户端，每页2个对象以覆盖翻页逻辑"""
    return FakeS3Client(page_size=2)


@pytest.fixture
def s3_storage(cloud_options, fake_s3_client):
    """使用内存版客户端的S3存储适配器"""
    return S3StorageAdapter(cloud_options, client=fake_s3_client)


@pytest.fixture
def fake_obs_sdk_client():
    """内存版ObsClient，每页2个对象以覆盖翻页逻辑"""
    return FakeObsSdkClient(page_size=2)


@pytest.fixture
def obs_storage(obs_options, fake_obs_sdk_client):
    """使用内存版客户端的OBS存储适配器"""
    return ObsStorageAdapter(obs_options, client=ObsClientWrapper(fake_obs_sdk_client))


@pytest.fixture(params=["local", "s3", "obs"])
def any_storage(request):
    """依次提供三种适配器，用于验证统一接口的共同行为"""
    return request.getfixturevalue("{}_storage".format(request.param))
