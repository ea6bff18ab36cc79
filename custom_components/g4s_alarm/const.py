# File: custom_components/g4s_alarm/const.py

DOMAIN = "g4s_alarm"

CONF_PANEL_ID = "panel_id"

# Config keys for advanced settings
CONF_UPDATE_INTERVAL = "update_interval"
CONF_SUPPRESSION_WINDOW = "suppression_window"
CONF_RESUME_DELAY = "resume_delay"
CONF_FETCH_TIMEOUT = "fetch_timeout"
CONF_RETRY_TOTAL = "retry_total"
CONF_RETRY_BACKOFF_FACTOR = "retry_backoff_factor"

# Default values for advanced settings
DEFAULT_UPDATE_INTERVAL = 10.0          # seconds between polling updates
DEFAULT_SUPPRESSION_WINDOW = 15.0       # seconds a user action shields the target from polling
DEFAULT_RESUME_DELAY = 15.0             # seconds after a command before polling resumes
DEFAULT_FETCH_TIMEOUT = 10.0            # seconds an on-demand state read may take
DEFAULT_RETRY_TOTAL = 3                 # HTTP retry attempts on network errors
DEFAULT_RETRY_BACKOFF_FACTOR = 0.5      # Exponential backoff multiplier for HTTP retries

API_BASE_URL = "https://api.smartalarm.g4s.com"

MANUFACTURER = "G4S"
MODEL = "SMART Alarm"
DEFAULT_NAME = "Alarm Panel"
