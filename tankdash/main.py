"""
Console entry point - polls the tank endpoint and prints each reading
"""
import argparse
import logging
import signal
import sys

from tankdash import __version__
from tankdash.config import API_URL, REFRESH_INTERVAL, load_config_file
from tankdash.state import DashboardState
from tankdash.tank import TankPoller

def print_view(view, connection_text):
    """Print a rendered view on one line"""
    print(f"[{connection_text}] {view['status_icon']} {view['status_text']} "
          f"{view['percentage']} | distance {view['distance']} | "
          f"{view['device']} @ {view['timestamp']}")

def report_cycle(state, ok):
    """Print the outcome of one fetch cycle"""
    _, connection_text = state.connection_display()
    alert = state.pop_alert()
    if alert:
        print(f"\n{alert}\n", file=sys.stderr)
    elif ok and state.view:
        print_view(state.view, connection_text)

def main():
    """Main entry point"""

    file_config = load_config_file()

    parser = argparse.ArgumentParser(
        prog='tankdash',
        description='Water tank level monitor (console)'
    )
    parser.add_argument('--url',
                       default=file_config.get('API_URL', API_URL),
                       help='Tank status endpoint URL')
    parser.add_argument('--interval', type=int,
                       default=file_config.get('REFRESH_INTERVAL', REFRESH_INTERVAL),
                       help=f'Seconds between fetches, 0 = fetch once (default: {REFRESH_INTERVAL})')
    parser.add_argument('--debug', action='store_true',
                       help='Enable console debug output')
    parser.add_argument('--version', action='version',
                       version=f'%(prog)s {__version__}')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.WARNING,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    print("Water Tank Dashboard Initialized")
    if args.interval:
        print(f"Auto-refresh enabled: every {args.interval} seconds")

    state = DashboardState()
    poller = TankPoller(state, args.url, args.interval, on_cycle=report_cycle, debug=args.debug)

    def signal_handler(signum, frame):
        """Handle shutdown signals gracefully"""
        if args.debug:
            print(f"\n\nReceived signal {signum}, shutting down...")
        poller.stop()

    signal.signal(signal.SIGINT, signal_handler)
    signal.signal(signal.SIGTERM, signal_handler)

    poller.start()
    while poller.is_alive():
        poller.join(timeout=1)

if __name__ == "__main__":
    main()
