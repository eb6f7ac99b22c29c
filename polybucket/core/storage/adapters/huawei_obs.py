"""
华为云OBS存储适配器
实现BaseStorage接口，基于华为云OBS SDK提供对象存储服务
"""

from typing import Any, BinaryIO, List, Optional

from polybucket.core.log_messages import log_messages
from polybucket.core.log_utils import get_logger
from polybucket.core.storage.base_storage import BaseStorage, Expiry, UploadData
from polybucket.core.storage.clients.obs_client import ObsClientError, ObsClientWrapper
from polybucket.core.storage.exceptions import StorageError, StorageFileNotFoundError
from polybucket.core.storage.models import StorageOptions, StorageProvider

logger = get_logger(__name__)

OBJECT_NOT_FOUND_CODES = frozenset({"NotFound", "NoSuchKey"})


def _storage_error(message: str, error: ObsClientError, **details: Any) -> StorageError:
    return StorageError(
        "{}: {}".format(message, str(error)),
        code=error.error_code,
        details=details,
        cause=error
    )


class ObsStorageAdapter(BaseStorage):
    """
    华为云OBS存储适配器

    通过 ObsClientWrapper 访问OBS，SDK的阻塞调用都放到线程池中执行
    """

    PROVIDER: StorageProvider = StorageProvider.HUAWEI_OBS

    def __init__(self, options: StorageOptions, client: Optional[ObsClientWrapper] = None) -> None:
        """
        初始化OBS存储适配器

        Args:
            options: 存储配置
            client: 预先创建的OBS客户端封装，不传则根据配置创建

        Raises:
            ConfigurationError: SDK未安装或配置不完整时抛出
        """
        super().__init__(options)
        self._client = client if client is not None else ObsClientWrapper.from_options(options)

    async def upload(self, bucket: str, key: str, data: UploadData) -> None:
        """上传文件到OBS，存储桶不存在且允许自动创建时先创建存储桶"""
        self._validate_input(bucket, key)

        try:
            if self.options.create_bucket_if_not_exists:
                if not await self._run_in_executor(self._client.head_bucket, bucket):
                    await self._run_in_executor(self._client.create_bucket, bucket, location=self.options.region)
                    logger.info(log_messages.BUCKET_CREATED, bucket=bucket)

            await self._run_in_executor(self._client.put_object, bucket, key, data)
        except ObsClientError as e:
            logger.error(log_messages.OBJECT_UPLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise _storage_error("上传文件到OBS失败", e, bucket=bucket, key=key) from e

        logger.info(log_messages.OBJECT_UPLOAD_SUCCESS, bucket=bucket, key=key)

    async def download(self, bucket: str, key: str, output: BinaryIO) -> None:
        """
        从OBS下载文件到输出流

        Raises:
            StorageFileNotFoundError: 错误码为 NoSuchKey
            StorageError: 其他OBS错误
        """
        self._validate_input(bucket, key)

        try:
            stream = await self._run_in_executor(self._client.get_object, bucket, key)
        except ObsClientError as e:
            if e.error_code == "NoSuchKey":
                logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
                raise StorageFileNotFoundError(bucket, key, cause=e) from e
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise _storage_error("从OBS下载文件失败", e, bucket=bucket, key=key) from e

        try:
            await self._copy_stream(stream.read, output)
        except OSError as e:
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "从OBS读取文件内容失败: {}".format(str(e)),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e
        finally:
            stream.close()

        logger.info(log_messages.OBJECT_DOWNLOAD_SUCCESS, bucket=bucket, key=key)

    async def delete(self, bucket: str, key: str) -> None:
        """删除OBS对象，对不存在的键按OBS自身语义处理"""
        self._validate_input(bucket, key)

        try:
            await self._run_in_executor(self._client.delete_object, bucket, key)
        except ObsClientError as e:
            logger.error(log_messages.OBJECT_DELETE_FAILED, exception=e, bucket=bucket, key=key)
            raise _storage_error("从OBS删除文件失败", e, bucket=bucket, key=key) from e

        logger.info(log_messages.OBJECT_DELETE_SUCCESS, bucket=bucket, key=key)

    async def exists(self, bucket: str, key: str) -> bool:
        self._validate_input(bucket, key)

        try:
            await self._run_in_executor(self._client.get_object_metadata, bucket, key)
        except ObsClientError as e:
            if e.status == 404 or e.error_code in OBJECT_NOT_FOUND_CODES:
                logger.info(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
                return False
            logger.error(log_messages.OBJECT_EXISTS_CHECK_FAILED, exception=e, bucket=bucket, key=key)
            raise _storage_error("OBS检查文件是否存在失败", e, bucket=bucket, key=key) from e
        return True

    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[str]:
        """列出OBS对象，跟随 marker 翻页直到结束"""
        self._validate_bucket(bucket)

        keys: List[str] = []
        marker = None
        try:
            while True:
                page, marker = await self._run_in_executor(
                    self._client.list_objects,
                    bucket,
                    prefix=prefix or None,
                    marker=marker
                )
                keys.extend(page)
                if not marker:
                    break
        except ObsClientError as e:
            logger.error(log_messages.OBJECT_LIST_FAILED, exception=e, bucket=bucket)
            raise _storage_error("OBS列出文件失败", e, bucket=bucket, prefix=prefix) from e

        logger.info(log_messages.OBJECT_LIST_SUCCESS, bucket=bucket, count=len(keys))
        return keys

    async def generate_presigned_url(self, bucket: str, key: str, expiry: Expiry) -> str:
        """生成临时签名GET URL，不检查对象是否存在"""
        self._validate_input(bucket, key)
        expires = self._expiry_seconds(expiry)

        try:
            url = await self._run_in_executor(self._client.create_signed_url, bucket, key, expires)
        except ObsClientError as e:
            logger.error(log_messages.PRESIGNED_URL_FAILED, exception=e, bucket=bucket, key=key)
            raise _storage_error("OBS生成预签名URL失败", e, bucket=bucket, key=key, expires=expires) from e

        logger.info(log_messages.PRESIGNED_URL_SUCCESS, bucket=bucket, key=key)
        return url

    async def _release(self) -> None:
        await self._run_in_executor(self._client.close)
        logger.info(log_messages.ADAPTER_CLOSED, provider=self.PROVIDER.value)


__all__ = ['ObsStorageAdapter']
