"""
日志消息模板模块
统一管理所有业务日志消息模板，便于维护和国际化
"""

from typing import Dict, Any


class LogMessages:
    """日志消息模板类"""

    # ==================== 通用日志消息 ====================
    OPERATION_SUCCESS = "操作成功完成: {operation_name}"

    # ==================== 存储适配器相关 ====================
    ADAPTER_REGISTERED = "已注册存储适配器: {provider}"
    ADAPTER_CREATED = "存储适配器创建成功: {provider}"
    ADAPTER_CREATE_FAILED = "创建存储适配器失败: {provider}"
    ADAPTER_CLOSED = "存储适配器已关闭: {provider}"

    # ==================== 存储桶相关 ====================
    BUCKET_CREATED = "存储桶 {bucket} 创建成功"

    # ==================== 对象操作相关 ====================
    OBJECT_UPLOAD_SUCCESS = "文件 {key} 已上传到存储桶 {bucket}"
    OBJECT_UPLOAD_FAILED = "上传文件 {key} 到存储桶 {bucket} 失败"

    OBJECT_DOWNLOAD_SUCCESS = "文件 {key} 已从存储桶 {bucket} 下载"
    OBJECT_DOWNLOAD_FAILED = "从存储桶 {bucket} 下载文件 {key} 失败"

    OBJECT_DELETE_SUCCESS = "文件 {key} 已从存储桶 {bucket} 删除"
    OBJECT_DELETE_FAILED = "从存储桶 {bucket} 删除文件 {key} 失败"

    OBJECT_NOT_FOUND = "存储桶 {bucket} 中不存在文件 {key}"
    OBJECT_EXISTS_CHECK_FAILED = "检查存储桶 {bucket} 中文件 {key} 是否存在失败"

    OBJECT_LIST_SUCCESS = "存储桶 {bucket} 中列出 {count} 个文件"
    OBJECT_LIST_FAILED = "列出存储桶 {bucket} 中的文件失败"

    PRESIGNED_URL_SUCCESS = "已为存储桶 {bucket} 中的文件 {key} 生成预签名URL"
    PRESIGNED_URL_FAILED = "为存储桶 {bucket} 中的文件 {key} 生成预签名URL失败"
    PRESIGNED_URL_LOCAL_PATH = "本地存储不支持预签名URL，返回文件路径: {key}"

    @classmethod
    def format_message(cls, message_template: str, **kwargs: Any) -> str:
        """格式化日志消息模板"""
        return message_template.format(**kwargs)

    @classmethod
    def get_structured_data(cls, **kwargs: Any) -> Dict[str, Any]:
        """获取结构化日志数据"""
        return kwargs


# 全局实例
log_messages = LogMessages()
