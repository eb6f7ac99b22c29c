"""
AWS S3存储适配器
实现BaseStorage接口，基于boto3提供S3及S3兼容服务的对象存储
"""

from typing import Any, BinaryIO, Dict, List, Optional

from botocore.exceptions import BotoCoreError, ClientError

from polybucket.core.log_messages import log_messages
from polybucket.core.log_utils import get_logger
from polybucket.core.storage.base_storage import BaseStorage, Expiry, UploadData
from polybucket.core.storage.exceptions import (
    ConfigurationError,
    StorageError,
    StorageFileNotFoundError,
)
from polybucket.core.storage.models import StorageOptions, StorageProvider

logger = get_logger(__name__)

DEFAULT_REGION = "us-east-1"

# HEAD请求没有响应体，不存在时错误码为HTTP状态码
OBJECT_NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchKey"})
BUCKET_NOT_FOUND_CODES = frozenset({"404", "NotFound", "NoSuchBucket"})
BUCKET_ALREADY_OWNED_CODES = frozenset({"BucketAlreadyOwnedByYou"})

S3_ERRORS = (ClientError, BotoCoreError)


def error_code(error: BaseException) -> Optional[str]:
    """提取botocore异常中的错误码，连接类错误没有错误码"""
    if isinstance(error, ClientError):
        return error.response.get("Error", {}).get("Code")
    return None


class S3StorageAdapter(BaseStorage):
    """
    AWS S3存储适配器

    使用boto3客户端提供对象存储服务，支持：
    - 上传时按需创建存储桶
    - 流式下载
    - ListObjectsV2 自动翻页
    - 预签名GET URL
    """

    PROVIDER: StorageProvider = StorageProvider.AWS_S3

    def __init__(self, options: StorageOptions, client: Optional[Any] = None) -> None:
        """
        初始化S3存储适配器

        Args:
            options: 存储配置
            client: 预先创建的boto3 S3客户端，不传则根据配置创建

        Raises:
            ConfigurationError: 客户端创建失败时抛出
        """
        super().__init__(options)
        self._client = client if client is not None else self._create_client(options)

    @staticmethod
    def _create_client(options: StorageOptions) -> Any:
        """
        创建boto3 S3客户端

        重试次数和超时交给botocore自身的配置处理
        """
        import boto3
        from botocore.config import Config

        config = Config(
            connect_timeout=options.timeout_seconds,
            read_timeout=options.timeout_seconds,
            retries={"max_attempts": options.max_retries, "mode": "standard"},
            s3={"addressing_style": "path" if options.force_path_style else "auto"}
        )
        try:
            return boto3.client(
                "s3",
                endpoint_url=options.endpoint or None,
                region_name=options.region or DEFAULT_REGION,
                aws_access_key_id=options.access_key or None,
                aws_secret_access_key=options.secret_key or None,
                config=config
            )
        except (BotoCoreError, ValueError) as e:
            raise ConfigurationError(
                "创建S3客户端失败: {}".format(str(e)),
                details={"endpoint": options.endpoint, "region": options.region}
            ) from e

    async def _bucket_exists(self, bucket: str) -> bool:
        try:
            await self._run_in_executor(self._client.head_bucket, Bucket=bucket)
        except ClientError as e:
            if error_code(e) in BUCKET_NOT_FOUND_CODES:
                return False
            raise
        return True

    async def _create_bucket(self, bucket: str) -> None:
        params: Dict[str, Any] = {"Bucket": bucket}
        region = self.options.region or DEFAULT_REGION
        if region != DEFAULT_REGION:
            params["CreateBucketConfiguration"] = {"LocationConstraint": region}

        try:
            await self._run_in_executor(self._client.create_bucket, **params)
        except ClientError as e:
            # 并发上传时可能已被其他调用方创建
            if error_code(e) not in BUCKET_ALREADY_OWNED_CODES:
                raise
        logger.info(log_messages.BUCKET_CREATED, bucket=bucket)

    async def upload(self, bucket: str, key: str, data: UploadData) -> None:
        """上传文件到S3，整个流一次性 put，不做分片"""
        self._validate_input(bucket, key)
        body = bytes(data) if isinstance(data, bytearray) else data

        try:
            if self.options.create_bucket_if_not_exists and not await self._bucket_exists(bucket):
                await self._create_bucket(bucket)

            await self._run_in_executor(
                self._client.put_object,
                Bucket=bucket,
                Key=key,
                Body=body
            )
        except S3_ERRORS as e:
            logger.error(log_messages.OBJECT_UPLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "上传文件到S3失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e

        logger.info(log_messages.OBJECT_UPLOAD_SUCCESS, bucket=bucket, key=key)

    async def download(self, bucket: str, key: str, output: BinaryIO) -> None:
        """
        从S3下载文件到输出流

        Raises:
            StorageFileNotFoundError: 错误码为 NoSuchKey
            StorageError: 其他S3错误
        """
        self._validate_input(bucket, key)

        try:
            response = await self._run_in_executor(self._client.get_object, Bucket=bucket, Key=key)
            body = response["Body"]
            try:
                await self._copy_stream(body.read, output)
            finally:
                body.close()
        except ClientError as e:
            if error_code(e) == "NoSuchKey":
                logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
                raise StorageFileNotFoundError(bucket, key, cause=e) from e
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "从S3下载文件失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e
        except BotoCoreError as e:
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "从S3下载文件失败: {}".format(str(e)),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e

        logger.info(log_messages.OBJECT_DOWNLOAD_SUCCESS, bucket=bucket, key=key)

    async def delete(self, bucket: str, key: str) -> None:
        """删除S3对象，对不存在的键按S3自身语义处理（通常直接成功）"""
        self._validate_input(bucket, key)

        try:
            await self._run_in_executor(self._client.delete_object, Bucket=bucket, Key=key)
        except S3_ERRORS as e:
            logger.error(log_messages.OBJECT_DELETE_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "从S3删除文件失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e

        logger.info(log_messages.OBJECT_DELETE_SUCCESS, bucket=bucket, key=key)

    async def exists(self, bucket: str, key: str) -> bool:
        self._validate_input(bucket, key)

        try:
            await self._run_in_executor(self._client.head_object, Bucket=bucket, Key=key)
        except ClientError as e:
            if error_code(e) in OBJECT_NOT_FOUND_CODES:
                logger.info(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
                return False
            logger.error(log_messages.OBJECT_EXISTS_CHECK_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "S3检查文件是否存在失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e
        except BotoCoreError as e:
            logger.error(log_messages.OBJECT_EXISTS_CHECK_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "S3检查文件是否存在失败: {}".format(str(e)),
                details={"bucket": bucket, "key": key},
                cause=e
            ) from e
        return True

    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[str]:
        """使用 ListObjectsV2 列出对象，跟随 continuation token 直到结束"""
        self._validate_bucket(bucket)

        params: Dict[str, Any] = {"Bucket": bucket}
        if prefix:
            params["Prefix"] = prefix

        keys: List[str] = []
        try:
            while True:
                response = await self._run_in_executor(self._client.list_objects_v2, **params)
                keys.extend(obj["Key"] for obj in response.get("Contents", []))

                token = response.get("NextContinuationToken")
                if not response.get("IsTruncated") or not token:
                    break
                params["ContinuationToken"] = token
        except S3_ERRORS as e:
            logger.error(log_messages.OBJECT_LIST_FAILED, exception=e, bucket=bucket)
            raise StorageError(
                "S3列出文件失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "prefix": prefix},
                cause=e
            ) from e

        logger.info(log_messages.OBJECT_LIST_SUCCESS, bucket=bucket, count=len(keys))
        return keys

    async def generate_presigned_url(self, bucket: str, key: str, expiry: Expiry) -> str:
        """生成预签名GET URL，不检查对象是否存在"""
        self._validate_input(bucket, key)
        expires = self._expiry_seconds(expiry)

        try:
            url = await self._run_in_executor(
                self._client.generate_presigned_url,
                ClientMethod="get_object",
                Params={"Bucket": bucket, "Key": key},
                ExpiresIn=expires
            )
        except S3_ERRORS as e:
            logger.error(log_messages.PRESIGNED_URL_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError(
                "S3生成预签名URL失败: {}".format(str(e)),
                code=error_code(e),
                details={"bucket": bucket, "key": key, "expires": expires},
                cause=e
            ) from e

        logger.info(log_messages.PRESIGNED_URL_SUCCESS, bucket=bucket, key=key)
        return url

    async def _release(self) -> None:
        await self._run_in_executor(self._client.close)
        logger.info(log_messages.ADAPTER_CLOSED, provider=self.PROVIDER.value)


__all__ = ['S3StorageAdapter']
