from storefront.config.settings import Settings, AppSettings, ApiSettings, EventBusSettings

__all__ = ["Settings", "AppSettings", "ApiSettings", "EventBusSettings"]
