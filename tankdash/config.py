"""
Configuration constants for the tank dashboard
"""
import os
from pathlib import Path

# Replace with the actual API Gateway endpoint
API_URL = "https://YOUR_API_GATEWAY_URL.execute-api.us-east-1.amazonaws.com/prod/status"
PLACEHOLDER_MARKER = "YOUR_API_GATEWAY_URL"

# Refresh Interval
REFRESH_INTERVAL = 30  # Seconds between automatic fetches (0 = manual refresh only)

# Access Gate (convenience gate only, compared in cleartext)
USERNAME = os.environ.get('TANKDASH_USER', 'host')
PASSWORD = os.environ.get('TANKDASH_PASS', 'login123')
LOGIN_ERROR_MESSAGE = 'Invalid username or password'

# Display Defaults
DEFAULT_DEVICE = 'ESP32_Tank'
DEFAULT_STATUS = 'Unknown'
DISTANCE_UNIT = 'cm'
CHART_MIN = 0
CHART_MAX = 100

# Shown with every fetch failure
TROUBLESHOOTING_TEXT = (
    "Failed to fetch data from AWS IoT. Please check:\n"
    "1. Your API Gateway URL is correct\n"
    "2. CORS is enabled on API Gateway\n"
    "3. ESP32 is sending data"
)

# Web Server Defaults
DEFAULT_HOST = '0.0.0.0'
DEFAULT_PORT = 5000

# Config file path (optional)
CONFIG_FILE = Path.home() / '.config' / 'tankdash' / 'dashboard.conf'

def load_config_file(path=None):
    """
    Load configuration from file if it exists.
    Returns dict of config values or empty dict if file doesn't exist.
    """
    config_file = Path(path) if path else CONFIG_FILE
    if not config_file.exists():
        return {}

    config = {}
    try:
        with open(config_file, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue

                if '=' in line:
                    key, value = line.split('=', 1)
                    key = key.strip()
                    value = value.strip()

                    # Convert to appropriate type
                    if value.lower() in ('true', 'false'):
                        config[key] = value.lower() == 'true'
                    elif value.isdigit():
                        config[key] = int(value)
                    else:
                        try:
                            config[key] = float(value)
                        except ValueError:
                            config[key] = value

        return config
    except OSError as e:
        print(f"Warning: Could not load config file {config_file}: {e}")
        return {}

# Flask session signing key (loaded from secrets file)
SECRET_KEY = ''

# Load secrets from secrets file
SECRETS_FILE = Path.home() / '.config' / 'tankdash' / 'secrets.conf'
if SECRETS_FILE.exists():
    try:
        with open(SECRETS_FILE, 'r') as f:
            for line in f:
                line = line.strip()
                if not line or line.startswith('#'):
                    continue

                if '=' in line:
                    key, value = line.split('=', 1)
                    if key.strip() == 'SECRET_KEY':
                        SECRET_KEY = value.strip()
    except OSError as e:
        print(f"Warning: Could not load secrets file {SECRETS_FILE}: {e}")
