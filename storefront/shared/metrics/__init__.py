from storefront.shared.metrics.metrics_collector import MetricsCollector
from storefront.shared.metrics.metrics_schema import ApiMetrics, OrderMetrics, BusMetrics

__all__ = ["MetricsCollector", "ApiMetrics", "OrderMetrics", "BusMetrics"]
