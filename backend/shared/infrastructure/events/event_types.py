"""
Event Type Constants.

Event names are shared with the web clients, which listen for them
verbatim on the socket.
"""

from shared.config.settings import settings

# =============================================================================
# Table session lifecycle
# =============================================================================

SESSION_OPENED = "session:opened"
SESSION_CANCELLED = "session:cancelled"

# =============================================================================
# Orders
# Flow: WAITING -> COOKING -> DONE -> SERVED
# =============================================================================

ORDER_NEW = "order:new"
ORDER_WAITING = "order:waiting"
ORDER_COOKING = "order:cooking"
ORDER_DONE = "order:done"
ORDER_SERVED = "order:served"

ORDER_STATUS_EVENTS = {
    "WAITING": ORDER_WAITING,
    "COOKING": ORDER_COOKING,
    "DONE": ORDER_DONE,
    "SERVED": ORDER_SERVED,
}

# =============================================================================
# Menu and billing
# =============================================================================

MENU_UNAVAILABLE = "menu:unavailable"
BILLING_CLOSED = "billing:closed"

# =============================================================================
# FlowTrak (delivered to the work order room)
# =============================================================================

CHECKPOINT_UPDATED = "checkpoint:updated"
ACTIVITY_NEW = "activity:new"
COMMENT_NEW = "comment:new"

# =============================================================================
# Size limits
# =============================================================================

# Same as the WebSocket message limit
MAX_EVENT_SIZE = settings.ws_max_message_size
