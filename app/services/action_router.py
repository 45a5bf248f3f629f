"""
action 分发：把 action 名称映射到条目服务的操作
"""
from typing import Any, Dict, Type

import structlog
from pydantic import BaseModel, ValidationError
from sqlalchemy.ext.asyncio import AsyncSession

from app.schemas.entry import InitPayload, ListPayload, ReadPayload, WritePayload, DeletePayload
from app.services.entry_service import EntryService

logger = structlog.get_logger()

# action -> 载荷模型
ACTION_PAYLOADS: Dict[str, Type[BaseModel]] = {
    "init": InitPayload,
    "list": ListPayload,
    "read": ReadPayload,
    "write": WritePayload,
    "delete": DeletePayload,
}


def parse_payload(action: str, raw_payload: Any) -> BaseModel:
    """
    按 action 校验载荷

    Raises:
        ValidationError: 载荷不符合对应模型
    """
    model = ACTION_PAYLOADS[action]
    if action == "init":
        return model()
    return model.model_validate(raw_payload)


def _describe_validation_error(exc: ValidationError) -> str:
    parts = []
    for err in exc.errors():
        loc = ".".join(str(item) for item in err.get("loc", ())) or "payload"
        parts.append(f"{loc}: {err.get('msg')}")
    return "Invalid payload: " + "; ".join(parts)


async def dispatch(
    action: str,
    raw_payload: Any,
    db: AsyncSession,
    recursive_delete: bool = True
) -> Dict[str, Any]:
    """
    执行 action

    未知 action 和载荷错误以 {"error": ...} 返回，不抛出异常；数据库异常照常向上传播。

    Args:
        action: init / list / read / write / delete
        raw_payload: 请求中的 payload
        db: 数据库会话
        recursive_delete: delete 是否使用递归CTE

    Returns:
        Dict: 操作结果
    """
    if action not in ACTION_PAYLOADS:
        return {"error": f"Unknown action: {action}"}

    try:
        payload = parse_payload(action, raw_payload)
    except ValidationError as e:
        message = _describe_validation_error(e)
        logger.info("fs.action.invalid_payload", action=action, reason=message)
        return {"error": message}

    if action == "init":
        return await EntryService.init(db)
    if action == "list":
        return await EntryService.list(db, payload)
    if action == "read":
        return await EntryService.read(db, payload)
    if action == "write":
        return await EntryService.write(db, payload)
    return await EntryService.delete(db, payload, recursive_cte=recursive_delete)
