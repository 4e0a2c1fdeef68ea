#!/usr/bin/env python3
"""
Tank status checker - runs one fetch cycle and displays the result
"""
import argparse
import sys
from datetime import datetime

from tankdash.config import API_URL, load_config_file
from tankdash.state import DashboardState
from tankdash.tank import fetch_tank_data

def main():
    """Main entry point"""
    file_config = load_config_file()

    parser = argparse.ArgumentParser(
        prog='tankdash.check',
        description='Check the current water tank status once'
    )
    parser.add_argument('--url', default=file_config.get('API_URL', API_URL),
                       help='Tank status endpoint URL')
    args = parser.parse_args()

    print("=" * 60)
    print("WATER TANK STATUS")
    print("=" * 60)
    print(f"Checked at: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}\n")

    state = DashboardState()
    ok = fetch_tank_data(state, args.url)
    _, connection_text = state.connection_display()

    print(f"Connection:  {connection_text}")
    if ok:
        view = state.view
        print(f"Level:       {view['percentage']}")
        print(f"Status:      {view['status_icon']} {view['status_text']}")
        print(f"Distance:    {view['distance']}")
        print(f"Device:      {view['device']}")
        print(f"Updated:     {view['timestamp']}")
        if state.chart is not None:
            print(f"History:     {len(state.chart.values)} points "
                  f"({state.chart.labels[0]} - {state.chart.labels[-1]})")
            state.chart.destroy()
    else:
        print(f"❌ Error: {state.last_error or 'Unknown error'}")

    print()
    print("=" * 60)
    return 0 if ok else 1

if __name__ == "__main__":
    sys.exit(main())
