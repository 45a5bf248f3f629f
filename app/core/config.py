"""
应用配置文件
"""
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import Optional


class Settings(BaseSettings):
    """应用配置"""

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", frozen=True)

    # 应用基本配置
    APP_NAME: str = "DA Cloud Filesystem"
    APP_VERSION: str = "0.0.1"
    DEBUG: bool = False

    # 服务标识（source_id = SERVICE_NAME/DA_INSTANCEID）
    SERVICE_NAME: str = "da-cloud-filesystem-cfp"
    DA_INSTANCEID: str = "default"

    # 写入令牌，未配置时拒绝所有请求
    DA_WRITE_TOKEN: Optional[str] = None

    # 数据库配置
    DB_URL: Optional[str] = None  # 完整连接串，优先于下面的分项配置
    DB_USERNAME: str = "postgres"
    DB_PASSWORD: str = "postgres"
    DB_HOST: str = "localhost"
    DB_PORT: int = 5432
    DB_NAME: str = "da_filesystem"
    DB_ECHO: bool = False

    # 启动时自动建表
    AUTO_INIT_DB: bool = False

    # 递归删除方式：True 使用递归CTE，False 使用逐层遍历
    RECURSIVE_DELETE: bool = True

    # 日志配置
    LOG_LEVEL: str = "INFO"
    LOG_JSON: bool = False

    # CORS配置
    CORS_ORIGINS: list = ["*"]

    @property
    def DATABASE_URL(self) -> str:
        """获取数据库连接URL"""
        if self.DB_URL:
            return self.DB_URL
        return f"postgresql+asyncpg://{self.DB_USERNAME}:{self.DB_PASSWORD}@{self.DB_HOST}:{self.DB_PORT}/{self.DB_NAME}"

    @property
    def SOURCE_ID(self) -> str:
        """响应信封中的 source_id"""
        return f"{self.SERVICE_NAME}/{self.DA_INSTANCEID}"


settings = Settings()
