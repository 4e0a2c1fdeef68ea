"""
Map a tank reading onto the values the dashboard displays
"""
import math
from datetime import datetime

from tankdash.config import DEFAULT_DEVICE, DEFAULT_STATUS, DISTANCE_UNIT
from tankdash.chart import replace_chart

# status (lowercase) -> (icon, label, CSS class)
STATUS_STYLES = {
    'full': ('💧', 'Full', 'status-full'),
    'medium': ('💦', 'Medium', 'status-medium'),
    'low': ('⚠️', 'Low', 'status-low'),
    'empty': ('🚨', 'Empty', 'status-empty'),
}
UNKNOWN_STATUS_ICON = '❓'

INVALID_DATE = 'Invalid Date'

def format_value(value):
    """
    Format a payload value for display.

    Numbers print the way the device reports them (45.0 shows as 45),
    anything else is shown as its string form.
    """
    if isinstance(value, bool):
        return 'true' if value else 'false'
    if isinstance(value, float):
        if math.isnan(value):
            return 'NaN'
        if math.isinf(value):
            return 'Infinity' if value > 0 else '-Infinity'
        if value.is_integer():
            return str(int(value))
    return str(value)

def to_datetime(timestamp):
    """
    Convert an epoch-milliseconds timestamp (or ISO string) to a local datetime.
    Returns None if the value cannot be interpreted as a time.
    """
    if isinstance(timestamp, datetime):
        return timestamp
    try:
        if isinstance(timestamp, (int, float)) and not isinstance(timestamp, bool):
            return datetime.fromtimestamp(timestamp / 1000)
        if isinstance(timestamp, str):
            return datetime.fromisoformat(timestamp.strip())
    except (ValueError, OverflowError, OSError):
        return None
    return None

def format_timestamp(timestamp):
    """Format as '19 Oct 2026, 07:02:03 pm' (India locale, 12-hour clock)"""
    dt = to_datetime(timestamp)
    if dt is None:
        return INVALID_DATE
    return dt.strftime('%d %b %Y, %I:%M:%S ') + dt.strftime('%p').lower()

def format_short_time(timestamp):
    """Format as '07:02 pm' for chart labels"""
    dt = to_datetime(timestamp)
    if dt is None:
        return INVALID_DATE
    return dt.strftime('%I:%M ') + dt.strftime('%p').lower()

def status_style(status):
    """
    Look up (icon, label, CSS class) for a status, ignoring case.
    Unrecognized statuses keep their own text and get no color class.
    """
    style = STATUS_STYLES.get(format_value(status).lower())
    if style:
        return style
    return UNKNOWN_STATUS_ICON, format_value(status), ''

def render_dashboard(state, reading, now=None):
    """
    Render one reading into state.view and refresh the chart.

    Missing fields fall back to defaults; present fields are shown as-is,
    without type or range checks (a level of 130 displays as 130%).
    Returns the new view.
    """
    if not isinstance(reading, dict):
        reading = {}

    level = reading.get('level') or 0
    status = reading.get('status') or DEFAULT_STATUS
    distance = reading.get('distance') or 0
    device = reading.get('device') or DEFAULT_DEVICE
    timestamp = reading.get('timestamp') or now or datetime.now()

    icon, label, css_class = status_style(status)

    view = {
        'water_height': f"{format_value(level)}%",
        'percentage': f"{format_value(level)}%",
        'status_icon': icon,
        'status_text': label,
        'status_class': css_class,
        'distance': f"{format_value(distance)} {DISTANCE_UNIT}",
        'device': format_value(device),
        'timestamp': format_timestamp(timestamp),
    }
    state.view = view

    history = reading.get('history')
    if isinstance(history, list) and history:
        replace_chart(state, history)

    return view
