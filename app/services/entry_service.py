"""
文件系统条目服务
"""
from datetime import datetime, timezone
from typing import Any, Dict, Optional

import structlog
from sqlalchemy import select, update, delete
from sqlalchemy.engine import Connection
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import aliased

from app.db.database import Base
from app.models.entry import Entry, TABLE_NAME, ROOT_ID
from app.schemas.entry import (
    ListPayload, ReadPayload, WritePayload, DeletePayload,
    InitResult, EntryListItem, EntryListResult, FileContent, WriteResult, DeleteResult
)

logger = structlog.get_logger()

ERR_FILE_NOT_FOUND = "File not found"
ERR_ENTRY_NOT_FOUND = "Entry not found"
ERR_PARENT_NOT_FOUND = "Parent folder not found"
ERR_MISSING_ID = "Missing ID"


def _now() -> datetime:
    return datetime.now(timezone.utc)


def _error(message: str) -> Dict[str, Any]:
    return {"error": message}


def create_schema(connection: Connection) -> None:
    """建表及索引（已存在则跳过）"""
    Base.metadata.create_all(bind=connection, tables=[Entry.__table__], checkfirst=True)


class EntryService:
    """文件系统条目服务类

    所有方法返回可直接放入 ack 的字典；业务错误以 {"error": ...} 返回而不抛出异常，
    数据库异常向上传播。
    """

    @classmethod
    async def init(cls, db: AsyncSession) -> Dict[str, Any]:
        """
        初始化存储（幂等）

        表和全部索引在同一个事务内创建，任一语句失败则整体回滚。
        """
        await db.run_sync(lambda session: create_schema(session.connection()))
        await db.commit()

        logger.info("fs.init.done", table=TABLE_NAME)
        return InitResult(message="Filesystem initialized", table=TABLE_NAME).model_dump()

    @classmethod
    async def list(cls, db: AsyncSession, payload: ListPayload) -> Dict[str, Any]:
        """
        列出直接子条目

        文件夹在前、文件在后，同组内按名称升序。

        Args:
            db: 数据库会话
            payload: parentId 为空时列出根目录

        Returns:
            Dict: {"items": [...]}
        """
        parent_id = payload.parentId if payload.parentId is not None else ROOT_ID

        result = await db.execute(
            select(Entry.id, Entry.name, Entry.is_folder, Entry.modified_at)
            .where(Entry.parent_id == parent_id)
            .order_by(Entry.is_folder.desc(), Entry.name.asc())
        )

        items = [
            EntryListItem(
                id=row.id,
                name=row.name,
                isFolder=bool(row.is_folder),
                modifiedAt=row.modified_at
            )
            for row in result.all()
        ]
        return EntryListResult(items=items).model_dump(mode="json")

    @classmethod
    async def read(cls, db: AsyncSession, payload: ReadPayload) -> Dict[str, Any]:
        """
        读取文件内容，文件夹视为不存在
        """
        if payload.id is None:
            return _error(ERR_MISSING_ID)

        result = await db.execute(
            select(Entry.name, Entry.content).where(
                Entry.id == payload.id,
                Entry.is_folder == False
            )
        )
        row = result.first()
        if row is None:
            return _error(ERR_FILE_NOT_FOUND)

        return FileContent(name=row.name, content=row.content).model_dump()

    @classmethod
    async def write(cls, db: AsyncSession, payload: WritePayload) -> Dict[str, Any]:
        """
        写入条目

        带 id 时只更新文件的 content 和 modified_at，名称、父目录和类型保持不变，
        文件夹没有内容，按不存在处理；不带 id 时新建条目。

        Args:
            db: 数据库会话
            payload: 写入载荷

        Returns:
            Dict: {"success": True, "id": ...}，条目或父文件夹不存在时返回错误
        """
        if payload.id is not None:
            return await cls._update_content(db, payload.id, payload.content)

        parent_id = payload.parentId or ROOT_ID
        if parent_id != ROOT_ID and not await cls._folder_exists(db, parent_id):
            return _error(ERR_PARENT_NOT_FOUND)

        is_folder = bool(payload.isFolder)
        now = _now()
        entry = Entry(
            name=payload.name,
            parent_id=parent_id,
            is_folder=is_folder,
            content=None if is_folder else payload.content,
            created_at=now,
            modified_at=now
        )
        db.add(entry)
        await db.commit()

        return WriteResult(success=True, id=entry.id).model_dump()

    @classmethod
    async def delete(
        cls,
        db: AsyncSession,
        payload: DeletePayload,
        recursive_cte: bool = True
    ) -> Dict[str, Any]:
        """
        删除条目及其全部子孙

        Args:
            db: 数据库会话
            payload: 要删除的条目ID
            recursive_cte: True 时用一条递归CTE语句删除，False 时逐层收集ID后批量删除

        Returns:
            Dict: {"deleted": 实际删除的行数}，ID不存在时为 0
        """
        if payload.id is None:
            return _error(ERR_MISSING_ID)

        if recursive_cte:
            deleted = await cls._delete_subtree_cte(db, payload.id)
        else:
            deleted = await cls._delete_subtree_bfs(db, payload.id)
        await db.commit()

        logger.info("fs.delete.done", entry_id=payload.id, deleted=deleted)
        return DeleteResult(deleted=deleted).model_dump()

    @staticmethod
    async def _folder_exists(db: AsyncSession, folder_id: int) -> bool:
        result = await db.execute(
            select(Entry.id).where(
                Entry.id == folder_id,
                Entry.is_folder == True
            )
        )
        return result.scalar_one_or_none() is not None

    @staticmethod
    async def _update_content(db: AsyncSession, entry_id: int, content: Optional[str]) -> Dict[str, Any]:
        result = await db.execute(
            update(Entry)
            .where(Entry.id == entry_id, Entry.is_folder == False)
            .values(content=content, modified_at=_now())
            .execution_options(synchronize_session=False)
        )
        await db.commit()

        if result.rowcount == 0:
            return _error(ERR_ENTRY_NOT_FOUND)
        return WriteResult(success=True, id=entry_id).model_dump()

    @staticmethod
    async def _delete_subtree_cte(db: AsyncSession, entry_id: int) -> int:
        # UNION 去重，父子关系出现环时递归也会终止
        subtree = (
            select(Entry.id)
            .where(Entry.id == entry_id)
            .cte(name="subtree", recursive=True)
        )
        parent = subtree.alias()
        child = aliased(Entry)
        subtree = subtree.union(
            select(child.id).where(child.parent_id == parent.c.id)
        )

        # WITH ... DELETE 在部分驱动上 rowcount 为 -1，用 RETURNING 计数
        result = await db.execute(
            delete(Entry)
            .where(Entry.id.in_(select(subtree.c.id)))
            .returning(Entry.id)
            .execution_options(synchronize_session=False)
        )
        return len(result.all())

    @staticmethod
    async def _delete_subtree_bfs(db: AsyncSession, entry_id: int) -> int:
        # 与CTE一致：目标不存在时不删除任何行
        target = await db.execute(select(Entry.id).where(Entry.id == entry_id))
        if target.scalar_one_or_none() is None:
            return 0

        collected = {entry_id}
        frontier = [entry_id]
        while frontier:
            result = await db.execute(
                select(Entry.id).where(Entry.parent_id.in_(frontier))
            )
            frontier = [child_id for child_id in result.scalars().all() if child_id not in collected]
            collected.update(frontier)

        result = await db.execute(
            delete(Entry)
            .where(Entry.id.in_(sorted(collected)))
            .execution_options(synchronize_session=False)
        )
        return result.rowcount or 0
