"""
Dashboard state shared between the fetch cycle and the display
"""

# Connection states
IDLE = 'idle'
FETCHING = 'fetching'
CONNECTED = 'connected'
OFFLINE = 'offline'
CONFIG_ERROR = 'config_error'

# state -> (dot CSS class, indicator text)
CONNECTION_DISPLAY = {
    IDLE: ('dot', 'Idle'),
    FETCHING: ('dot', 'Fetching...'),
    CONNECTED: ('dot online', 'Connected'),
    OFFLINE: ('dot offline', 'Offline'),
    CONFIG_ERROR: ('dot offline', 'Not Configured'),
}

class DashboardState:
    """
    Everything the dashboard keeps between fetch cycles.

    Readings are not kept: only the last rendered view, the chart and the
    connection indicator survive a cycle. Nothing here is locked, so
    overlapping fetches simply overwrite each other.
    """

    def __init__(self):
        self.connection = IDLE
        self.view = None
        self.chart = None
        self.refresh_enabled = True
        self.alert = None
        self.last_error = None
        self.fetch_count = 0

    def set_connection(self, connection):
        """Overwrite the connection indicator"""
        if connection not in CONNECTION_DISPLAY:
            raise ValueError(f"Unknown connection state: {connection}")
        self.connection = connection

    def show_alert(self, message):
        """Queue a blocking alert for the operator"""
        self.alert = message

    def pop_alert(self):
        """Return the pending alert (if any) and clear it"""
        message, self.alert = self.alert, None
        return message

    def connection_display(self):
        """Return (dot class, text) for the current connection state"""
        return CONNECTION_DISPLAY[self.connection]

    def get_snapshot(self):
        """Get current state snapshot"""
        dot_class, text = self.connection_display()
        return {
            'connection': self.connection,
            'connection_class': dot_class,
            'connection_text': text,
            'refresh_enabled': self.refresh_enabled,
            'view': dict(self.view) if self.view else None,
            'has_chart': self.chart is not None,
            'last_error': self.last_error,
            'fetch_count': self.fetch_count,
        }
