from pydantic import BaseModel, Field
from typing import Optional, List

# ============= AUTH SCHEMAS =============

class TokenData(BaseModel):
    username: Optional[str] = None
    token_type: Optional[str] = None
    is_superuser: bool = False

# ============= MAINTENANCE SCHEMAS =============

class MaintenanceToggle(BaseModel):
    enabled: bool


class MaintenanceStatus(BaseModel):
    enabled: bool


class AllowListUpdate(BaseModel):
    addresses: str = Field("", max_length=4096, description="Comma-separated IP addresses or ranges, no spaces")


class AllowListInfo(BaseModel):
    addresses: List[str]
