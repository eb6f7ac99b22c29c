"""
华为云OBS客户端封装
OBS SDK 以响应状态码而非异常报告错误，这里统一转换为带错误码的 ObsClientError
"""

from typing import Any, BinaryIO, List, Optional, Tuple, Union

from polybucket.core.storage.exceptions import ConfigurationError
from polybucket.core.storage.models import StorageOptions


class ObsClientError(Exception):
    """
    OBS请求错误

    Attributes:
        status: HTTP状态码（SDK自身抛出异常时为 None）
        error_code: OBS错误码，如 NoSuchKey、AccessDenied
        error_message: OBS错误消息
        request_id: 请求ID
    """

    def __init__(
        self,
        message: str,
        status: Optional[int] = None,
        error_code: Optional[str] = None,
        error_message: Optional[str] = None,
        request_id: Optional[str] = None
    ) -> None:
        super().__init__(message)
        self.status = status
        self.error_code = error_code
        self.error_message = error_message
        self.request_id = request_id

    def __str__(self) -> str:
        parts = [super().__str__()]
        if self.status is not None:
            parts.append("status={}".format(self.status))
        if self.error_code:
            parts.append("code={}".format(self.error_code))
        if self.error_message:
            parts.append("message={}".format(self.error_message))
        return ", ".join(parts)


class ObsClientWrapper:
    """
    ObsClient 的同步封装

    每个方法在请求失败时抛出 ObsClientError，成功时返回响应体。
    所有方法都是阻塞调用，由适配器放到线程池中执行。
    """

    def __init__(self, client: Any) -> None:
        self._client = client

    @classmethod
    def from_options(cls, options: StorageOptions) -> "ObsClientWrapper":
        """
        根据存储配置创建OBS客户端

        Raises:
            ConfigurationError: SDK未安装或端点未配置时抛出
        """
        try:
            from obs import ObsClient
        except ImportError as e:
            raise ConfigurationError(
                "华为云OBS SDK未安装，请运行: pip install esdk-obs-python",
                details={"provider": options.provider.value}
            ) from e

        if not options.endpoint:
            raise ConfigurationError("华为云OBS必须配置 endpoint")

        client = ObsClient(
            access_key_id=options.access_key,
            secret_access_key=options.secret_key,
            server=options.endpoint,
            timeout=options.timeout_seconds,
            max_retry_count=options.max_retries
        )
        return cls(client)

    def _call(self, operation: str, func: Any, *args: Any, **kwargs: Any) -> Any:
        """调用SDK方法并检查响应状态"""
        try:
            resp = func(*args, **kwargs)
        except Exception as e:
            raise ObsClientError("OBS {} 请求异常: {}".format(operation, e)) from e

        if resp.status >= 300:
            raise ObsClientError(
                "OBS {} 请求失败".format(operation),
                status=resp.status,
                error_code=resp.errorCode,
                error_message=resp.errorMessage,
                request_id=getattr(resp, "requestId", None)
            )
        return resp

    def head_bucket(self, bucket: str) -> bool:
        """存储桶存在返回 True，不存在返回 False，其他错误抛出异常"""
        try:
            self._call("HeadBucket", self._client.headBucket, bucket)
        except ObsClientError as e:
            if e.status == 404 or e.error_code == "NoSuchBucket":
                return False
            raise
        return True

    def create_bucket(self, bucket: str, location: Optional[str] = None) -> None:
        self._call("CreateBucket", self._client.createBucket, bucket, location=location)

    def put_object(self, bucket: str, key: str, data: Union[bytes, bytearray, BinaryIO]) -> None:
        content = bytes(data) if isinstance(data, bytearray) else data
        self._call("PutObject", self._client.putContent, bucket, key, content=content)

    def get_object(self, bucket: str, key: str) -> Any:
        """
        获取对象

        Returns:
            可读的响应流（带 read/close 方法），调用方负责关闭
        """
        resp = self._call("GetObject", self._client.getObject, bucket, key, loadStreamInMemory=False)
        return resp.body.response

    def delete_object(self, bucket: str, key: str) -> None:
        self._call("DeleteObject", self._client.deleteObject, bucket, key)

    def get_object_metadata(self, bucket: str, key: str) -> Any:
        return self._call("GetObjectMetadata", self._client.getObjectMetadata, bucket, key).body

    def list_objects(
        self,
        bucket: str,
        prefix: Optional[str] = None,
        marker: Optional[str] = None
    ) -> Tuple[List[str], Optional[str]]:
        """
        列出一页对象键

        Returns:
            (对象键列表, 下一页的 marker)，没有下一页时 marker 为 None
        """
        body = self._call(
            "ListObjects",
            self._client.listObjects,
            bucket,
            prefix=prefix,
            marker=marker
        ).body
        keys = [content.key for content in (body.contents or [])]

        if not body.is_truncated:
            return keys, None
        # 未指定 delimiter 时响应可能不带 next_marker，用本页最后一个键继续
        next_marker = body.next_marker or (keys[-1] if keys else None)
        return keys, next_marker

    def create_signed_url(self, bucket: str, key: str, expires: int, method: str = "GET") -> str:
        try:
            resp = self._client.createSignedUrl(method, bucketName=bucket, objectKey=key, expires=expires)
        except Exception as e:
            raise ObsClientError("OBS CreateSignedUrl 异常: {}".format(e)) from e
        return resp.signedUrl

    def close(self) -> None:
        self._client.close()


__all__ = [
    'ObsClientError',
    'ObsClientWrapper',
]
