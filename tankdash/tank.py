"""
Tank status fetching via the remote status endpoint
"""
import logging
import threading
import time

import requests

from tankdash.config import API_URL, PLACEHOLDER_MARKER, REFRESH_INTERVAL, TROUBLESHOOTING_TEXT
from tankdash.render import render_dashboard
from tankdash.state import FETCHING, CONNECTED, OFFLINE, CONFIG_ERROR

def get_tank_data(url, timeout=None):
    """
    Fetch the tank status JSON with a single GET (no retry).

    Returns dict with:
        status: 'success' or 'error'
        data: parsed JSON body (if status='success')
        error_type: 'network', 'http' or 'parse' (if status='error')
        error_message (if status='error')
    """
    try:
        response = requests.get(url, timeout=timeout)
    except requests.Timeout:
        return {
            'status': 'error',
            'error_type': 'network',
            'error_message': f"Timeout after {timeout}s"
        }
    except requests.ConnectionError as e:
        return {
            'status': 'error',
            'error_type': 'network',
            'error_message': f"Connection error: {str(e)}"
        }
    except requests.RequestException as e:
        return {
            'status': 'error',
            'error_type': 'network',
            'error_message': f"Request failed: {str(e)}"
        }

    if not 200 <= response.status_code < 300:
        return {
            'status': 'error',
            'error_type': 'http',
            'error_message': f"HTTP error! status: {response.status_code}"
        }

    try:
        data = response.json()
    except ValueError as e:
        return {
            'status': 'error',
            'error_type': 'parse',
            'error_message': f"Parse error: {str(e)}"
        }

    return {
        'status': 'success',
        'data': data
    }

def failure_alert(error_message):
    """Alert text shown to the operator when a fetch fails"""
    return f"{TROUBLESHOOTING_TEXT}\n\nError: {error_message}"

def fetch_tank_data(state, url=API_URL, timeout=None, now=None):
    """
    Run one fetch cycle: fetch, render and update the connection indicator.

    The manual refresh control is disabled while the request is in flight
    and re-enabled however the cycle ends. On failure the previous view
    stays on screen. Returns True if a reading was rendered.
    """
    if PLACEHOLDER_MARKER in url:
        message = "API URL is not configured"
        logging.error(f"{message}: {url}")
        state.set_connection(CONFIG_ERROR)
        state.last_error = message
        state.show_alert(failure_alert(message))
        return False

    state.refresh_enabled = False
    try:
        state.set_connection(FETCHING)
        state.fetch_count += 1

        result = get_tank_data(url, timeout=timeout)

        if result['status'] == 'success':
            previous_view = state.view
            try:
                render_dashboard(state, result['data'], now=now)
            except Exception as e:
                # Unrenderable payload counts as a failed cycle
                state.view = previous_view
                result = {
                    'status': 'error',
                    'error_type': 'parse',
                    'error_message': f"Render error: {str(e)}"
                }
            else:
                state.set_connection(CONNECTED)
                state.last_error = None
                return True

        error_msg = result.get('error_message', 'Unknown error')
        logging.error(f"Error fetching tank data: {error_msg}")
        state.set_connection(OFFLINE)
        state.last_error = error_msg
        state.show_alert(failure_alert(error_msg))
        return False
    finally:
        state.refresh_enabled = True

class TankPoller(threading.Thread):
    """Thread running the fetch cycle on a fixed interval"""

    def __init__(self, state, url=API_URL, interval=REFRESH_INTERVAL,
                 on_cycle=None, debug=False):
        super().__init__(daemon=True)
        self.state = state
        self.url = url
        self.interval = interval
        self.on_cycle = on_cycle
        self.debug = debug
        self.running = True

    def stop(self):
        """Stop the polling thread"""
        self.running = False

    def run(self):
        """Fetch once immediately, then every interval seconds"""
        consecutive_errors = 0

        while self.running:
            try:
                ok = fetch_tank_data(self.state, self.url)
                if self.debug:
                    print(f"[Tank Update] {'ok' if ok else 'failed'}, "
                          f"connection: {self.state.connection}")
                if self.on_cycle:
                    self.on_cycle(self.state, ok)
                consecutive_errors = 0
            except Exception as e:
                consecutive_errors += 1
                logging.error(f"Tank poller cycle failed: {e}")
                if self.debug:
                    print(f"\n[Tank Monitor Exception {consecutive_errors}] {e}")
                    import traceback
                    traceback.print_exc()

            if not self.interval:
                break

            # Sleep in small increments to allow faster shutdown
            for _ in range(int(self.interval)):
                if not self.running:
                    break
                time.sleep(1)
