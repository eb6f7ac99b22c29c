"""
统一存储接口测试
对本地、S3、OBS三种适配器验证相同的行为约定
"""

import io
from datetime import timedelta

import pytest

from polybucket.core.storage import InvalidArgumentError, StorageError, StorageFileNotFoundError


@pytest.mark.unit
@pytest.mark.storage
class TestStorageContract:
    """三种适配器共同遵守的接口约定"""

    @pytest.mark.asyncio
    async def test_upload_then_download_returns_same_bytes(self, any_storage):
        """上传后下载得到完全相同的内容"""
        content = bytes(range(256)) * 1024

        await any_storage.upload("docs", "blob.bin", io.BytesIO(content))

        output = io.BytesIO()
        await any_storage.download("docs", "blob.bin", output)
        assert output.getvalue() == content

    @pytest.mark.asyncio
    async def test_upload_accepts_bytes(self, any_storage):
        """上传数据可以直接是字节"""
        await any_storage.upload("docs", "a.txt", b"hello")

        output = io.BytesIO()
        await any_storage.download("docs", "a.txt", output)
        assert output.getvalue() == b"hello"

    @pytest.mark.asyncio
    async def test_second_upload_overwrites(self, any_storage):
        """重复上传同一个键会覆盖旧内容"""
        await any_storage.upload("docs", "a.txt", b"first version")
        await any_storage.upload("docs", "a.txt", b"v2")

        output = io.BytesIO()
        await any_storage.download("docs", "a.txt", output)
        assert output.getvalue() == b"v2"

    @pytest.mark.asyncio
    async def test_download_missing_key_raises_not_found(self, any_storage):
        """下载从未上传的键抛出 StorageFileNotFoundError"""
        await any_storage.upload("docs", "a.txt", b"hello")

        with pytest.raises(StorageFileNotFoundError) as exc_info:
            await any_storage.download("docs", "missing.txt", io.BytesIO())

        assert exc_info.value.bucket == "docs"
        assert exc_info.value.key == "missing.txt"
        assert exc_info.value.code == "NOT_FOUND"

    @pytest.mark.asyncio
    async def test_exists_false_then_true(self, any_storage):
        """不存在时返回 False 且不抛异常，上传后返回 True"""
        assert await any_storage.exists("docs", "a.txt") is False

        await any_storage.upload("docs", "a.txt", b"hello")

        assert await any_storage.exists("docs", "a.txt") is True

    @pytest.mark.asyncio
    async def test_list_returns_uploaded_keys(self, any_storage):
        """上传 a.txt、b.txt 后列出的键集合恰好是这两个"""
        await any_storage.upload("docs", "a.txt", b"hello")
        await any_storage.upload("docs", "b.txt", b"world")

        assert set(await any_storage.list("docs")) == {"a.txt", "b.txt"}

    @pytest.mark.asyncio
    async def test_list_ignores_duplicate_uploads(self, any_storage):
        """重复上传同一个键只列出一次"""
        for key in ["c.txt", "a.txt", "c.txt", "b.txt", "a.txt"]:
            await any_storage.upload("docs", key, b"x")

        keys = await any_storage.list("docs")
        assert sorted(keys) == ["a.txt", "b.txt", "c.txt"]

    @pytest.mark.asyncio
    async def test_list_with_prefix(self, any_storage):
        """带前缀时只返回以该前缀开头的键"""
        for key in ["report-1.csv", "report-2.csv", "report-3.csv", "summary.txt"]:
            await any_storage.upload("docs", key, b"x")

        keys = await any_storage.list("docs", prefix="report-")
        assert set(keys) == {"report-1.csv", "report-2.csv", "report-3.csv"}

    @pytest.mark.asyncio
    async def test_list_follows_all_pages(self, any_storage):
        """对象数超过一页时返回全部键"""
        expected = {"file-{}.txt".format(i) for i in range(7)}
        for key in expected:
            await any_storage.upload("docs", key, b"x")

        keys = await any_storage.list("docs")
        assert len(keys) == len(expected)
        assert set(keys) == expected

    @pytest.mark.asyncio
    async def test_delete_removes_object(self, any_storage):
        """删除后对象不再存在"""
        await any_storage.upload("docs", "a.txt", b"hello")

        await any_storage.delete("docs", "a.txt")

        assert await any_storage.exists("docs", "a.txt") is False
        assert await any_storage.list("docs") == []

    @pytest.mark.asyncio
    async def test_presigned_url_for_existing_object(self, any_storage):
        """为已存在的对象生成访问地址"""
        await any_storage.upload("docs", "a.txt", b"hello")

        url = await any_storage.generate_presigned_url("docs", "a.txt", timedelta(minutes=10))

        assert isinstance(url, str)
        assert "a.txt" in url

    @pytest.mark.asyncio
    @pytest.mark.parametrize("bucket,key", [
        ("", "a.txt"),
        ("   ", "a.txt"),
        ("docs", ""),
        ("docs", " \t "),
    ])
    async def test_blank_arguments_rejected_before_io(self, any_storage, bucket, key):
        """空或只含空白的存储桶、对象键在任何I/O之前被拒绝"""
        with pytest.raises(InvalidArgumentError):
            await any_storage.upload(bucket, key, b"x")
        with pytest.raises(InvalidArgumentError):
            await any_storage.download(bucket, key, io.BytesIO())
        with pytest.raises(InvalidArgumentError):
            await any_storage.delete(bucket, key)
        with pytest.raises(InvalidArgumentError):
            await any_storage.exists(bucket, key)
        with pytest.raises(InvalidArgumentError):
            await any_storage.generate_presigned_url(bucket, key, 60)

    @pytest.mark.asyncio
    async def test_list_rejects_blank_bucket(self, any_storage):
        """列出文件时存储桶名称不能为空"""
        with pytest.raises(InvalidArgumentError):
            await any_storage.list("  ")

    def test_invalid_argument_is_not_storage_error(self):
        """参数校验错误不属于存储错误"""
        assert not issubclass(InvalidArgumentError, StorageError)
        assert issubclass(InvalidArgumentError, ValueError)

    @pytest.mark.asyncio
    async def test_close_is_idempotent(self, any_storage):
        """关闭可以重复调用，未使用过的适配器也可以关闭"""
        await any_storage.close()
        await any_storage.close()
        assert any_storage.closed is True

    @pytest.mark.asyncio
    async def test_async_context_manager_closes(self, any_storage):
        """async with 退出时自动关闭"""
        async with any_storage as storage:
            await storage.upload("docs", "a.txt", b"hello")
        assert any_storage.closed is True

    @pytest.mark.asyncio
    async def test_operations_after_close_raise_storage_error(self, any_storage):
        """关闭后的适配器拒绝所有操作"""
        await any_storage.upload("docs", "a.txt", b"hello")
        await any_storage.close()

        with pytest.raises(StorageError) as exc_info:
            await any_storage.upload("docs", "b.txt", b"x")
        assert exc_info.value.code == "ADAPTER_CLOSED"

        with pytest.raises(StorageError):
            await any_storage.download("docs", "a.txt", io.BytesIO())
        with pytest.raises(StorageError):
            await any_storage.delete("docs", "a.txt")
        with pytest.raises(StorageError):
            await any_storage.exists("docs", "a.txt")
        with pytest.raises(StorageError):
            await any_storage.list("docs")
        with pytest.raises(StorageError):
            await any_storage.generate_presigned_url("docs", "a.txt", 60)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("expiry", ["ten minutes", None, float("nan"), float("inf")])
    async def test_presigned_url_rejects_invalid_expiry(self, any_storage, expiry):
        """无法换算为秒数的过期时间抛出 InvalidArgumentError"""
        await any_storage.upload("docs", "a.txt", b"hello")

        with pytest.raises(InvalidArgumentError):
            await any_storage.generate_presigned_url("docs", "a.txt", expiry)
