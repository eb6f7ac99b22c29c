"""
存储抽象基类
定义统一的对象存储接口，本地文件系统、AWS S3、华为云OBS适配器均实现该接口
"""

import asyncio
from abc import ABC, abstractmethod
from datetime import timedelta
from functools import partial
from typing import Any, BinaryIO, Callable, List, Optional, TypeVar, Union

from polybucket.core.storage.exceptions import InvalidArgumentError, StorageError
from polybucket.core.storage.models import StorageOptions, StorageProvider

T = TypeVar('T')

# 上传数据：完整字节或可读的二进制流
UploadData = Union[bytes, bytearray, BinaryIO]

# 过期时间：timedelta 或秒数
Expiry = Union[timedelta, int, float]

# 流式复制的分块大小
COPY_CHUNK_SIZE = 64 * 1024


class BaseStorage(ABC):
    """
    存储抽象基类

    所有操作都是协程。适配器不持有任何单次调用相关的可变状态，
    同一实例可被多个调用方并发使用。
    """

    # 适配器对应的存储提供商，用于工厂注册
    PROVIDER: StorageProvider

    def __init__(self, options: StorageOptions) -> None:
        self.options = options
        self._closed = False

    @abstractmethod
    async def upload(self, bucket: str, key: str, data: UploadData) -> None:
        """
        上传文件，覆盖已存在的同名对象

        Args:
            bucket: 存储桶名称
            key: 对象键
            data: 文件数据（字节或可读二进制流）

        Raises:
            InvalidArgumentError: 存储桶或对象键为空
            StorageError: 上传失败时抛出
        """

    @abstractmethod
    async def download(self, bucket: str, key: str, output: BinaryIO) -> None:
        """
        下载文件，将对象内容写入调用方提供的输出流

        Args:
            bucket: 存储桶名称
            key: 对象键
            output: 可写的二进制输出流

        Raises:
            StorageFileNotFoundError: 对象不存在
            StorageError: 下载失败时抛出
        """

    @abstractmethod
    async def delete(self, bucket: str, key: str) -> None:
        """
        删除文件

        Args:
            bucket: 存储桶名称
            key: 对象键

        Raises:
            StorageError: 删除失败时抛出
        """

    @abstractmethod
    async def exists(self, bucket: str, key: str) -> bool:
        """
        检查文件是否存在

        对象不存在时返回 False，只有通信或权限等真实错误才会抛出异常

        Args:
            bucket: 存储桶名称
            key: 对象键

        Returns:
            bool: 文件是否存在
        """

    @abstractmethod
    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[str]:
        """
        列出存储桶中的对象键

        自动跟随分页直到结束，返回完整的结果列表

        Args:
            bucket: 存储桶名称
            prefix: 可选的键前缀过滤

        Returns:
            List[str]: 对象键列表
        """

    @abstractmethod
    async def generate_presigned_url(self, bucket: str, key: str, expiry: Expiry) -> str:
        """
        生成限时访问URL

        Args:
            bucket: 存储桶名称
            key: 对象键
            expiry: 有效期（timedelta 或秒数）

        Returns:
            str: 访问URL

        Raises:
            StorageError: 生成URL失败时抛出
        """

    async def close(self) -> None:
        """释放底层客户端，可重复调用"""
        if self._closed:
            return
        self._closed = True
        await self._release()

    async def _release(self) -> None:
        """子类覆盖以释放自己持有的厂商客户端"""

    async def __aenter__(self) -> "BaseStorage":
        return self

    async def __aexit__(self, *exc_info: Any) -> None:
        await self.close()

    @property
    def closed(self) -> bool:
        return self._closed

    def _validate_bucket(self, bucket: str) -> None:
        """
        校验适配器状态和存储桶名称

        Raises:
            StorageError: 适配器已关闭
            InvalidArgumentError: 存储桶名称为空
        """
        if self._closed:
            raise StorageError(
                "存储适配器已关闭: {}".format(self.PROVIDER.value),
                code="ADAPTER_CLOSED"
            )
        if not isinstance(bucket, str) or not bucket.strip():
            raise InvalidArgumentError("bucket", "存储桶名称不能为空")

    def _validate_input(self, bucket: str, key: str) -> None:
        """校验存储桶和对象键，必须在任何I/O之前调用"""
        self._validate_bucket(bucket)
        if not isinstance(key, str) or not key.strip():
            raise InvalidArgumentError("key", "对象键不能为空")

    @staticmethod
    def _expiry_seconds(expiry: Expiry) -> int:
        """将过期时间统一换算为整秒数"""
        try:
            if isinstance(expiry, timedelta):
                seconds = int(expiry.total_seconds())
            else:
                seconds = int(expiry)
        except (TypeError, ValueError, OverflowError) as e:
            raise InvalidArgumentError("expiry", "过期时间必须是 timedelta 或秒数: {!r}".format(expiry)) from e
        if seconds <= 0:
            raise InvalidArgumentError("expiry", "过期时间必须大于0秒")
        return seconds

    async def _run_in_executor(self, func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """
        在线程池中运行同步函数

        Args:
            func: 同步函数
            *args: 函数位置参数
            **kwargs: 函数关键字参数

        Returns:
            函数执行结果
        """
        loop = asyncio.get_running_loop()
        bound_func = partial(func, *args, **kwargs)
        return await loop.run_in_executor(None, bound_func)

    async def _copy_stream(self, read_chunk: Callable[[int], bytes], output: BinaryIO) -> int:
        """
        分块把数据从读取函数复制到输出流

        每个分块读取都在线程池中执行，任务被取消时在分块之间停止等待

        Returns:
            int: 复制的总字节数
        """
        total = 0
        while True:
            chunk = await self._run_in_executor(read_chunk, COPY_CHUNK_SIZE)
            if not chunk:
                break
            output.write(chunk)
            total += len(chunk)
        return total


__all__ = [
    'BaseStorage',
    'UploadData',
    'Expiry',
    'COPY_CHUNK_SIZE',
]
