"""
文件系统条目Schema模型
"""
from pydantic import BaseModel, Field
from typing import Optional, List
from datetime import datetime


# ---------- 请求载荷（按 action 区分） ----------

class InitPayload(BaseModel):
    """init 请求载荷（内容被忽略）"""
    pass


class ListPayload(BaseModel):
    """list 请求载荷"""
    parentId: Optional[int] = Field(None, description="父文件夹ID，为空表示根目录")


class ReadPayload(BaseModel):
    """read 请求载荷"""
    id: Optional[int] = Field(None, description="文件ID")


class WritePayload(BaseModel):
    """write 请求载荷：带 id 为更新内容，不带 id 为新建"""
    id: Optional[int] = Field(None, description="条目ID，存在时只更新内容")
    parentId: Optional[int] = Field(None, description="父文件夹ID，为空表示根目录")
    name: Optional[str] = Field(None, max_length=255, description="名称")
    content: Optional[str] = Field(None, description="文件内容")
    isFolder: Optional[bool] = Field(False, description="是否为文件夹")


class DeletePayload(BaseModel):
    """delete 请求载荷"""
    id: Optional[int] = Field(None, description="要删除的条目ID，其子树一并删除")


# ---------- 操作结果 ----------

class InitResult(BaseModel):
    message: str
    table: str


class EntryListItem(BaseModel):
    """目录列表项（不含内容）"""
    id: int
    name: Optional[str] = None
    isFolder: bool
    modifiedAt: datetime


class EntryListResult(BaseModel):
    items: List[EntryListItem] = []


class FileContent(BaseModel):
    name: Optional[str] = None
    content: Optional[str] = None


class WriteResult(BaseModel):
    success: bool = True
    id: int


class DeleteResult(BaseModel):
    deleted: int = 0
