"""
文件系统条目模型（文件与文件夹共用一张表）
"""
from sqlalchemy import Column, Integer, String, Boolean, Float, Text, TIMESTAMP

from app.db.database import Base

TABLE_NAME = "da_filesystem_root"

# 根目录的 parent_id
ROOT_ID = 0


class Entry(Base):
    __tablename__ = TABLE_NAME

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(255), nullable=True, index=True)
    parent_id = Column(Integer, nullable=False, default=ROOT_ID, index=True)
    is_folder = Column(Boolean, nullable=False, default=False, index=True)
    content = Column(Text, nullable=True)
    created_at = Column(TIMESTAMP(timezone=True), nullable=False, index=True)
    modified_at = Column(TIMESTAMP(timezone=True), nullable=False, index=True)

    # 保留字段
    reserved_at = Column(TIMESTAMP(timezone=True), nullable=True)
    reserved_str1 = Column(String(255), nullable=True)
    reserved_str2 = Column(String(255), nullable=True)
    reserved_int1 = Column(Integer, nullable=True)
    reserved_int2 = Column(Integer, nullable=True)
    reserved_double1 = Column(Float, nullable=True)
    reserved_text1 = Column(Text, nullable=True)
