from .setup import setup_observability, configure_logging
from .metrics import (
    booking_orders_total,
    booking_order_duration_seconds,
    booking_saga_compensation_total,
    booking_inventory_fallback_mode
)
