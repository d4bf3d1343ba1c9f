from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional

DEFAULT_PRODUCTION_ORIGIN = "https://participation-app.vercel.app"


class Settings(BaseSettings):
    """
    应用程序配置设置类，从环境变量或.env文件加载所有配置项。
    使用Pydantic进行数据验证和类型检查。

    包含服务器配置、运行环境、数据库连接、API密钥、CORS 和限流等配置项。
    逗号分隔的列表配置（API_KEYS、ALLOWED_ORIGINS）以字符串形式读取，
    通过对应的属性解析为列表。
    """
    # Server
    BACKEND_PORT: int = 8000

    # Model configuration tells Pydantic where to find the .env file.
    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding='utf-8',
        extra='ignore',
        case_sensitive=True
    )

    PROJECT_NAME: str = "Participation Tracker"
    API_PREFIX: str = "/api"

    # development / production / test，决定鉴权、CORS 与限流的启用方式
    ENVIRONMENT: Literal["development", "production", "test"] = "development"

    DATABASE_URL: str = "sqlite:///./participation.db"

    # Auth
    API_KEYS: str = ""
    TRUSTED_FRONTEND_ORIGIN: Optional[str] = None

    # CORS
    ALLOWED_ORIGINS: str = ""

    # Rate limiting
    RATE_LIMIT_BACKEND: Literal["memory", "redis"] = "memory"
    RATE_LIMIT_WINDOW_MS: int = 60 * 1000
    REDIS_URL: str = "redis://localhost:6379/0"

    LOG_LEVEL: str = "INFO"

    @property
    def api_key_list(self) -> List[str]:
        return _split_csv(self.API_KEYS)

    @property
    def allowed_origin_list(self) -> List[str]:
        return _split_csv(self.ALLOWED_ORIGINS) or [DEFAULT_PRODUCTION_ORIGIN]

    @property
    def is_production(self) -> bool:
        return self.ENVIRONMENT == "production"


def _split_csv(value: str) -> List[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


# Create a single, globally accessible instance of the settings.
settings = Settings()
