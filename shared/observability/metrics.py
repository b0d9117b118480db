from prometheus_client import Counter, Histogram, Gauge

# Business Metrics
booking_orders_total = Counter(
    "booking_orders_total",
    "Total orders processed",
    ["status"] # Labels: 'placed', 'rejected', 'failed'
)

booking_order_duration_seconds = Histogram(
    "booking_order_duration_seconds",
    "Order placement duration in seconds"
)

booking_saga_compensation_total = Counter(
    "booking_saga_compensation_total",
    "Total saga compensations triggered",
    ["step_name"] # Labels: 'reserve_spaces', 'create_order'
)

booking_inventory_fallback_mode = Gauge(
    "booking_inventory_fallback_mode",
    "1 when the lesson inventory runs on the in-memory fallback"
)
