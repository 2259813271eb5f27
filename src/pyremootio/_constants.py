"""Internal constants shared across the library."""

DEFAULT_PORT = 8080
#: Websocket keepalive interval in seconds, matching the device's own default.
DEFAULT_PING_INTERVAL: float = 60.0

MANUFACTURER = "Remootio"
MODEL = "Remootio"

# ------------------------------------------------------------------
# Device payload vocabulary
# ------------------------------------------------------------------

#: ``keyType`` carried by events the integration's own API key caused.
API_KEY_TYPE = "api key"

EVENT_STATE_CHANGE = "StateChange"
EVENT_RELAY_TRIGGER = "RelayTrigger"
RESPONSE_QUERY = "QUERY"
