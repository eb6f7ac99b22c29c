"""
本地文件系统存储适配器
实现BaseStorage接口，将 (bucket, key) 映射为 root/bucket/key，用于无云依赖的开发和测试
"""

import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, BinaryIO, List, Optional

from polybucket.core.log_messages import log_messages
from polybucket.core.log_utils import get_logger
from polybucket.core.storage.base_storage import BaseStorage, Expiry, UploadData
from polybucket.core.storage.exceptions import (
    InvalidArgumentError,
    StorageError,
    StorageFileNotFoundError,
)
from polybucket.core.storage.models import StorageOptions, StorageProvider

logger = get_logger(__name__)

# 上传临时文件名前缀，对象键中不允许出现
TEMP_FILE_MARKER = ".polybucket-upload-"


class LocalStorageAdapter(BaseStorage):
    """
    本地文件系统存储适配器

    - 存储桶是根目录下的子目录，首次写入时自动创建
    - 上传先写临时文件再原子替换，并发写同一个键时最后完成的写入生效
    - 不支持真正的预签名URL，返回文件的绝对路径
    """

    PROVIDER: StorageProvider = StorageProvider.LOCAL

    def __init__(self, options: StorageOptions, client: Optional[Any] = None) -> None:
        """
        初始化本地存储根目录

        本地存储没有厂商客户端，client 参数仅为保持工厂调用方式一致

        Raises:
            StorageError: 根目录无法创建时抛出
        """
        super().__init__(options)
        self.root = Path(options.local_storage_path).expanduser().absolute()
        try:
            self.root.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise StorageError(
                "无法创建本地存储目录: {}".format(self.root),
                code="LOCAL_IO_ERROR",
                cause=e
            ) from e

    @staticmethod
    def _is_inside(parent: str, child: str) -> bool:
        return child != parent and os.path.commonpath([parent, child]) == parent

    def _bucket_path(self, bucket: str) -> Path:
        """
        计算存储桶目录

        Raises:
            InvalidArgumentError: 存储桶名称指向根目录之外或包含空字符
        """
        if "\x00" in bucket:
            raise InvalidArgumentError("bucket", "存储桶名称不能包含空字符")
        root = os.path.normpath(self.root)
        bucket_path = os.path.normpath(os.path.join(root, bucket))
        if not self._is_inside(root, bucket_path):
            raise InvalidArgumentError("bucket", "存储桶名称不能指向存储根目录之外: {}".format(bucket))
        return Path(bucket_path)

    def _object_path(self, bucket: str, key: str) -> Path:
        """
        计算对象路径

        Raises:
            InvalidArgumentError: 对象键指向存储桶目录之外，或包含空字符、临时文件前缀
        """
        if "\x00" in key:
            raise InvalidArgumentError("key", "对象键不能包含空字符")
        if TEMP_FILE_MARKER in key:
            raise InvalidArgumentError("key", "对象键不能包含保留字符串: {}".format(TEMP_FILE_MARKER))
        bucket_path = str(self._bucket_path(bucket))
        object_path = os.path.normpath(os.path.join(bucket_path, key))
        if not self._is_inside(bucket_path, object_path):
            raise InvalidArgumentError("key", "对象键不能指向存储桶目录之外: {}".format(key))
        return Path(object_path)

    @staticmethod
    def _write_file(target: Path, data: UploadData) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(dir=target.parent, prefix=TEMP_FILE_MARKER)
        try:
            with os.fdopen(fd, "wb") as tmp_file:
                if isinstance(data, (bytes, bytearray)):
                    tmp_file.write(data)
                else:
                    shutil.copyfileobj(data, tmp_file)
            os.replace(tmp_name, target)
        except BaseException:
            if os.path.exists(tmp_name):
                os.remove(tmp_name)
            raise

    async def upload(self, bucket: str, key: str, data: UploadData) -> None:
        """上传文件到本地目录"""
        self._validate_input(bucket, key)
        target = self._object_path(bucket, key)

        try:
            await self._run_in_executor(self._write_file, target, data)
        except OSError as e:
            logger.error(log_messages.OBJECT_UPLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError("本地存储上传失败", code="LOCAL_IO_ERROR", cause=e) from e

        logger.info(log_messages.OBJECT_UPLOAD_SUCCESS, bucket=bucket, key=key)

    async def download(self, bucket: str, key: str, output: BinaryIO) -> None:
        """将本地文件内容写入输出流"""
        self._validate_input(bucket, key)
        source = self._object_path(bucket, key)

        try:
            file_obj = await self._run_in_executor(open, source, "rb")
        except (FileNotFoundError, IsADirectoryError, NotADirectoryError) as e:
            logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
            raise StorageFileNotFoundError(bucket, key, cause=e) from e
        except OSError as e:
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError("本地存储下载失败", code="LOCAL_IO_ERROR", cause=e) from e

        try:
            await self._copy_stream(file_obj.read, output)
        except OSError as e:
            logger.error(log_messages.OBJECT_DOWNLOAD_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError("本地存储下载失败", code="LOCAL_IO_ERROR", cause=e) from e
        finally:
            file_obj.close()

        logger.info(log_messages.OBJECT_DOWNLOAD_SUCCESS, bucket=bucket, key=key)

    async def delete(self, bucket: str, key: str) -> None:
        """
        删除本地文件

        Raises:
            StorageFileNotFoundError: 文件不存在
            StorageError: 删除失败
        """
        self._validate_input(bucket, key)
        target = self._object_path(bucket, key)

        if not await self._run_in_executor(target.is_file):
            logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
            raise StorageFileNotFoundError(bucket, key)

        try:
            await self._run_in_executor(os.remove, target)
        except FileNotFoundError as e:
            logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
            raise StorageFileNotFoundError(bucket, key, cause=e) from e
        except OSError as e:
            logger.error(log_messages.OBJECT_DELETE_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError("本地存储删除失败", code="LOCAL_IO_ERROR", cause=e) from e

        logger.info(log_messages.OBJECT_DELETE_SUCCESS, bucket=bucket, key=key)

    async def exists(self, bucket: str, key: str) -> bool:
        self._validate_input(bucket, key)
        target = self._object_path(bucket, key)

        try:
            return await self._run_in_executor(target.is_file)
        except OSError as e:
            logger.error(log_messages.OBJECT_EXISTS_CHECK_FAILED, exception=e, bucket=bucket, key=key)
            raise StorageError("本地存储检查文件是否存在失败", code="LOCAL_IO_ERROR", cause=e) from e

    @staticmethod
    def _walk_keys(bucket_path: Path, prefix: Optional[str]) -> List[str]:
        if not bucket_path.is_dir():
            return []
        keys = []
        for path in bucket_path.rglob("*"):
            # 跳过目录和上传过程中的临时文件
            if not path.is_file() or path.name.startswith(TEMP_FILE_MARKER):
                continue
            key = path.relative_to(bucket_path).as_posix()
            if prefix and not key.startswith(prefix):
                continue
            keys.append(key)
        return sorted(keys)

    async def list(self, bucket: str, prefix: Optional[str] = None) -> List[str]:
        """
        列出存储桶目录下的文件

        返回相对存储桶目录的键（扁平键即为文件名），存储桶目录不存在时返回空列表
        """
        self._validate_bucket(bucket)

        try:
            keys = await self._run_in_executor(self._walk_keys, self._bucket_path(bucket), prefix)
        except OSError as e:
            logger.error(log_messages.OBJECT_LIST_FAILED, exception=e, bucket=bucket)
            raise StorageError("本地存储列出文件失败", code="LOCAL_IO_ERROR", cause=e) from e

        logger.info(log_messages.OBJECT_LIST_SUCCESS, bucket=bucket, count=len(keys))
        return keys

    async def generate_presigned_url(self, bucket: str, key: str, expiry: Expiry) -> str:
        """
        返回文件的绝对路径

        本地存储无法生成真正的限时URL，expiry 仅做校验；文件必须存在

        Raises:
            StorageFileNotFoundError: 文件不存在
        """
        self._validate_input(bucket, key)
        self._expiry_seconds(expiry)
        target = self._object_path(bucket, key)

        if not await self._run_in_executor(target.is_file):
            logger.warning(log_messages.OBJECT_NOT_FOUND, bucket=bucket, key=key)
            raise StorageFileNotFoundError(bucket, key)

        logger.info(log_messages.PRESIGNED_URL_LOCAL_PATH, key=key)
        return str(target)


__all__ = ['LocalStorageAdapter']
