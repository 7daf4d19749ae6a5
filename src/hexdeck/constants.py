"""Global constants for hexdeck."""

# Companion server endpoint

SERVER_HOST = "127.0.0.1"
SERVER_PORT = 7433

# Files and directories

DATA_DIR_NAME = ".hexdeck"
PID_FILE_NAME = "server.pid"
SERVER_BINARY_NAME = "hexdeck-server"
DASHBOARD_DIR_NAME = "dashboard"

# Environment overrides

ENV_HOME = "HEXDECK_HOME"
ENV_RESOURCE_DIR = "HEXDECK_RESOURCE_DIR"
ENV_SERVER_PORT = "HEXDECK_SERVER_PORT"
ENV_PROBE_TIMEOUT = "HEXDECK_PROBE_TIMEOUT"
ENV_POLL_INTERVAL = "HEXDECK_POLL_INTERVAL"
ENV_POLL_ATTEMPTS = "HEXDECK_POLL_ATTEMPTS"

# Probe and wait budget

DEFAULT_PROBE_TIMEOUT = 2.0
DEFAULT_POLL_INTERVAL = 0.5
DEFAULT_POLL_ATTEMPTS = 10

# Diagnostic log buffer

DEFAULT_LOG_BUFFER_SIZE = 500
