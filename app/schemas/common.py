"""
通用Schema模型：ack/nack 响应信封
"""
from pydantic import BaseModel
from typing import Any, Dict, Literal

UNKNOWN_REQUEST_ID = "unknown"


class ErrorCode:
    """nack 错误码"""
    UNAUTHORIZED = "UNAUTHORIZED"
    INVALID_FIELD = "INVALID_FIELD"
    REQUEST_FAILED = "REQUEST_FAILED"
    SYSTEM_ERROR = "SYSTEM_ERROR"


class NackPayload(BaseModel):
    status: Literal["error"] = "error"
    code: str
    message: str


class AckEnvelope(BaseModel):
    """成功响应信封"""
    type: Literal["ack"] = "ack"
    request_id: str
    source_id: str
    payload: Dict[str, Any] = {}


class NackEnvelope(BaseModel):
    """失败响应信封"""
    type: Literal["nack"] = "nack"
    request_id: str
    source_id: str
    payload: NackPayload
