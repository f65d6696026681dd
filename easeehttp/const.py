"""Constants for the Easee HTTP python library."""

USER_AGENT = "python-easee-http"
CONTENT_TYPE = "application/json"

DEFAULT_CONFIG_FILE = "conf/config.json"
DEFAULT_AUTH_FILE = "data/auth.json"

# Circuit limits in amperes. The API publishes no upper bound; 80 is ours.
MIN_AMPS = 0
MAX_AMPS = 80

PATH_TOKEN = "/api/accounts/token"
PATH_REFRESH_TOKEN = "/api/accounts/refresh_token"
PATH_CHARGERS = "/api/chargers"
PATH_CHARGER_STATE = "/api/chargers/{charger_id}/state"
PATH_CHARGER_SESSIONS = (
    "/api/sessions/charger/{charger_id}/sessions/{date_from}/{date_to}"
)
PATH_CIRCUIT_SETTINGS = "/api/sites/{site_id}/circuits/{circuit_id}/settings"

# Persisted credential keys
ACCESS_TOKEN = "accessToken"
REFRESH_TOKEN = "refreshToken"
TOKEN_TYPE = "tokenType"
EXPIRES_IN = "expiresIn"
EXPIRES = "expires"

CIRCUIT_LIMIT_FIELDS = (
    "maxCircuitCurrentP1",
    "maxCircuitCurrentP2",
    "maxCircuitCurrentP3",
    "offlineMaxCircuitCurrentP1",
    "offlineMaxCircuitCurrentP2",
    "offlineMaxCircuitCurrentP3",
)
