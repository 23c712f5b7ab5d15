"""异常定义模块"""

from enum import Enum


class ErrorKind(str, Enum):
    """错误类型枚举（恢复逻辑按类型分支，不看消息文本）"""
    CONFIGURATION = "configuration"
    AUTHENTICATION = "authentication"
    TRANSIENT_REMOTE = "transient_remote"
    INVALID_TASK_RESPONSE = "invalid_task_response"
    INVALID_GENERATED_CONTENT = "invalid_generated_content"
    WORKFLOW = "workflow"
    CRITICAL_LOOP = "critical_loop"


class DailyTaskError(Exception):
    """所有业务异常的基类"""

    kind: ErrorKind = ErrorKind.WORKFLOW

    def __init__(self, message: str, kind: ErrorKind | None = None):
        super().__init__(message)
        if kind is not None:
            self.kind = kind


class ConfigurationError(DailyTaskError):
    """没有可用的账号配置，启动即退出"""
    kind = ErrorKind.CONFIGURATION


class AuthenticationFailure(DailyTaskError):
    """nonce / 签名 / 登录未得到可用令牌"""
    kind = ErrorKind.AUTHENTICATION


class TransientRemoteFailure(DailyTaskError):
    """可重试的远程调用失败"""
    kind = ErrorKind.TRANSIENT_REMOTE


class InvalidTaskResponse(DailyTaskError):
    """远程响应缺少必要字段"""
    kind = ErrorKind.INVALID_TASK_RESPONSE


class InvalidGeneratedContent(DailyTaskError):
    """AI 生成内容无法解析或字段为空"""
    kind = ErrorKind.INVALID_GENERATED_CONTENT


class WorkflowFailure(DailyTaskError):
    """单个账号流程中的未预期异常"""
    kind = ErrorKind.WORKFLOW


class CriticalLoopFailure(DailyTaskError):
    """逃逸出整轮循环的异常"""
    kind = ErrorKind.CRITICAL_LOOP
