# Inbound message kinds
CONTROLLER_JOIN = "controller_join"
TARGET_JOIN = "target_join"
RELAY_MESSAGE = "relay_message"
PING = "ping"

# Older clients still speak the sender/client vocabulary.
LEGACY_ALIASES: dict[str, str] = {
    "sender_join": CONTROLLER_JOIN,
    "client_join": TARGET_JOIN,
    "prank_message": RELAY_MESSAGE,
}

# Outbound message kinds
ERROR = "error"
PONG = "pong"
TARGET_COUNT = "target_count"
WAITING_FOR_TARGET = "waiting_for_target"
TARGET_ACQUIRED = "target_acquired"
CONNECTED = "connected"
PRANK_MESSAGE = "prank_message"
PRANK_DELIVERED = "prank_delivered"
CONTROLLER_DISCONNECTED = "controller_disconnected"
TARGET_UPDATE = "target_update"
TARGET_LOST = "target_lost"

# Error codes carried by ``error`` messages
INVALID_ROOM_CODE = "invalid_room_code"
ALREADY_JOINED = "already_joined"
NOT_CONTROLLER = "not_controller"
NO_TARGETS = "no_targets"

STATUS_ONLINE = "Prank Relay Server Online"

__all__ = [
    "CONTROLLER_JOIN",
    "TARGET_JOIN",
    "RELAY_MESSAGE",
    "PING",
    "LEGACY_ALIASES",
    "ERROR",
    "PONG",
    "TARGET_COUNT",
    "WAITING_FOR_TARGET",
    "TARGET_ACQUIRED",
    "CONNECTED",
    "PRANK_MESSAGE",
    "PRANK_DELIVERED",
    "CONTROLLER_DISCONNECTED",
    "TARGET_UPDATE",
    "TARGET_LOST",
    "INVALID_ROOM_CODE",
    "ALREADY_JOINED",
    "NOT_CONTROLLER",
    "NO_TARGETS",
    "STATUS_ONLINE",
]
