"""
认证工具函数
"""
import hmac
from dataclasses import dataclass
from typing import Optional

from fastapi import Request


@dataclass(frozen=True)
class ServiceContext:
    """启动时解析一次的只读服务上下文"""
    source_id: str
    write_token: Optional[str]
    recursive_delete: bool = True


def get_service_context(request: Request) -> ServiceContext:
    """FastAPI 依赖：获取当前应用的服务上下文"""
    return request.app.state.service_context


def extract_bearer_token(authorization: Optional[str]) -> Optional[str]:
    """
    从 Authorization 请求头提取 token

    Args:
        authorization: 格式为 "Bearer {token}"

    Returns:
        str: token，格式不对时返回 None
    """
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme != "Bearer" or not token:
        return None
    return token


def verify_write_token(authorization: Optional[str], expected: Optional[str]) -> bool:
    """
    校验写入令牌

    未配置令牌时一律拒绝；比较使用常量时间
    """
    if not expected:
        return False
    token = extract_bearer_token(authorization)
    if token is None:
        return False
    return hmac.compare_digest(token.encode("utf-8"), expected.encode("utf-8"))
