from pathlib import Path
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import field_validator, AnyHttpUrl
from typing import Optional, Any, List


class Settings(BaseSettings):
    # --- Project Settings ---
    PROJECT_NAME: str = "Maintenance Gate"
    API_V1_STR: str = "/api/v1"
    API_PORT: str = "8000"
    BASE_DIR: Path = Path(__file__).resolve().parent.parent.parent

    # --- Security Settings ---
    SECRET_KEY: str
    ALGORITHM: str = "HS256"
    ACCESS_TOKEN_EXPIRE_MINUTES: int = 30

    # --- Runtime Data Settings ---
    VAR_DIR: Optional[Path] = None

    @field_validator("VAR_DIR", mode="before")
    @classmethod
    def assemble_var_dir(cls, v: Optional[str], info) -> Any:
        if v:
            return v
        return Path(info.data.get("BASE_DIR")) / "var"

    # --- Maintenance Mode Settings ---
    MAINTENANCE_FLAG_FILENAME: str = ".maintenance.flag"
    MAINTENANCE_IP_FILENAME: str = ".maintenance.ip"
    MAINTENANCE_MESSAGE: str = "Service temporarily unavailable for maintenance"
    MAINTENANCE_RETRY_AFTER: int = 3600
    TRUST_FORWARDED_FOR: bool = False

    # --- CORS Settings ---
    BACKEND_CORS_ORIGINS: List[AnyHttpUrl] = []

    model_config = SettingsConfigDict(case_sensitive=True, env_file=".env", validate_default=True)


settings = Settings()
