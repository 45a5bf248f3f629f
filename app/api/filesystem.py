"""
文件系统API：单一入口 /api，按 action 分发，响应统一为 ack/nack 信封
"""
import json
from typing import Any, Dict

import structlog
from fastapi import APIRouter, Depends, Request, status
from fastapi.exception_handlers import http_exception_handler as default_http_exception_handler
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.exceptions import HTTPException as StarletteHTTPException

from app.db.database import get_db
from app.schemas.common import AckEnvelope, NackEnvelope, NackPayload, ErrorCode, UNKNOWN_REQUEST_ID
from app.services.action_router import dispatch
from app.utils.auth import ServiceContext, get_service_context, verify_write_token

router = APIRouter(tags=["文件系统"])

logger = structlog.get_logger()

ALL_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]
API_PATH = "/api"


class PrettyJSONResponse(JSONResponse):
    """缩进两格输出的JSON响应"""

    def render(self, content: Any) -> bytes:
        return json.dumps(content, ensure_ascii=False, indent=2).encode("utf-8")


def ack(request_id: str, source_id: str, payload: Dict[str, Any]) -> Response:
    envelope = AckEnvelope(request_id=request_id, source_id=source_id, payload=payload or {})
    return PrettyJSONResponse(envelope.model_dump(mode="json"))


def nack(request_id: str, source_id: str, code: str, message: str) -> Response:
    envelope = NackEnvelope(
        request_id=request_id,
        source_id=source_id,
        payload=NackPayload(code=code, message=message)
    )
    return PrettyJSONResponse(envelope.model_dump(mode="json"), status_code=status.HTTP_400_BAD_REQUEST)


@router.api_route(API_PATH, methods=ALL_METHODS)
async def handle_api_request(
    request: Request,
    db: AsyncSession = Depends(get_db),
    ctx: ServiceContext = Depends(get_service_context)
):
    """
    文件系统请求入口

    请求体：{"request_id": str, "action": str, "payload": {...}}
    """
    if request.method != "POST":
        return method_not_allowed()

    # 认证（此时尚未解析请求体，request_id 未知）
    if not verify_write_token(request.headers.get("Authorization"), ctx.write_token):
        logger.warning("fs.request.unauthorized", client=request.client.host if request.client else None)
        return nack(UNKNOWN_REQUEST_ID, ctx.source_id, ErrorCode.UNAUTHORIZED, "Invalid token")

    try:
        body = await request.json()
        if not isinstance(body, dict):
            raise ValueError("Request body must be a JSON object")

        request_id = str(body.get("request_id") or UNKNOWN_REQUEST_ID)
        if body.get("payload") is None:
            return nack(request_id, ctx.source_id, ErrorCode.INVALID_FIELD, "Missing payload")

        action = str(body.get("action") or "")
        result = await dispatch(action, body["payload"], db, recursive_delete=ctx.recursive_delete)
        if result.get("error"):
            logger.info("fs.action.failed", request_id=request_id, action=action, error=result["error"])
            return nack(request_id, ctx.source_id, ErrorCode.REQUEST_FAILED, result["error"])

        return ack(request_id, ctx.source_id, result)
    except Exception as e:
        await db.rollback()
        logger.exception("fs.system_error")
        return nack(UNKNOWN_REQUEST_ID, ctx.source_id, ErrorCode.SYSTEM_ERROR, str(e))


def method_not_allowed() -> Response:
    return PlainTextResponse("Method Not Allowed", status_code=status.HTTP_405_METHOD_NOT_ALLOWED)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> Response:
    """
    /api 上未列出的方法（TRACE 等）同样返回纯文本 405，其余异常交给默认处理
    """
    if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == API_PATH:
        return method_not_allowed()
    return await default_http_exception_handler(request, exc)
