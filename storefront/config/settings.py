from typing import Optional

from pydantic_settings import BaseSettings


# ----------------------------
# General / App settings
# ----------------------------
class AppSettings(BaseSettings):
    app_name: str = "storefront"
    debug: bool = True

    # Logger
    log_file: str = "logs/storefront.log"
    log_level: str = "INFO"


# ----------------------------
# Backend API settings
# ----------------------------
class ApiSettings(BaseSettings):
    base_url: str = "http://localhost:5173"
    timeout: float = 10.0
    token: Optional[str] = None

    orders_path: str = "/api/orders"

    def order_path(self, order_id: str) -> str:
        return f"{self.orders_path}/{order_id}"


# ----------------------------
# In-process event bus settings
# ----------------------------
class EventBusSettings(BaseSettings):
    max_retries: int = 3
    retry_delay: float = 0.5


# ----------------------------
# Top-level settings
# ----------------------------
class Settings(BaseSettings):
    app: AppSettings = AppSettings()
    api: ApiSettings = ApiSettings()
    event_bus: EventBusSettings = EventBusSettings()

    class Config:
        env_file = ".env"
        env_file_encoding = "utf-8"
        extra = "ignore"
