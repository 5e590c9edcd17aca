class ApiMetrics:
    """Metric keys for ApiClient"""
    REQUESTS = "api_requests"
    FAILED_REQUESTS = "api_failed_requests"
    HTTP_ERRORS = "api_http_errors"
    TRANSPORT_ERRORS = "api_transport_errors"


class OrderMetrics:
    """Metric keys for OrderService"""
    CREATED = "orders_created"
    CREATE_FAILED = "orders_create_failed"
    LISTED = "orders_listed"
    LIST_FAILED = "orders_list_failed"
    FETCHED = "order_fetched"
    FETCH_FAILED = "order_fetch_failed"


class BusMetrics:
    """Metric keys for InProcessEventBus"""
    PUBLISHED = "events_published"
    SUBSCRIBER_SUCCESS = "subscriber_success"
    SUBSCRIBER_FAILURE = "subscriber_failure"
    SUBSCRIBER_GAVE_UP = "subscriber_gave_up"
