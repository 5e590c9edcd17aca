from storefront.shared.clients.api_client import ApiClient, ApiError, ApiResponse

__all__ = ["ApiClient", "ApiError", "ApiResponse"]
