#!/usr/bin/env python3
"""
Web dashboard for the water tank
Serves a login form and the tank status page
"""
import argparse
import io
import logging
import secrets

from flask import (
    Flask, render_template, request, redirect, url_for, session, jsonify, send_file, Response
)

from tankdash import __version__
from tankdash.auth import attempt_login, is_logged_in, logout, requires_login
from tankdash.config import (
    API_URL, REFRESH_INTERVAL, SECRET_KEY, LOGIN_ERROR_MESSAGE,
    DEFAULT_HOST, DEFAULT_PORT, load_config_file
)
from tankdash.state import DashboardState
from tankdash.tank import fetch_tank_data

def create_app(state=None, api_url=API_URL, refresh_interval=REFRESH_INTERVAL, secret_key=None):
    """Build the Flask app around one shared DashboardState"""
    app = Flask(__name__)
    app.secret_key = secret_key or SECRET_KEY or secrets.token_hex(32)
    app.config['TANK_STATE'] = state if state is not None else DashboardState()
    app.config['API_URL'] = api_url
    app.config['REFRESH_INTERVAL'] = refresh_interval

    def dashboard_state():
        return app.config['TANK_STATE']

    def render_dashboard_page():
        state = dashboard_state()
        dot_class, connection_text = state.connection_display()
        return render_template('dashboard.html',
                               version=__version__,
                               view=state.view,
                               has_chart=state.chart is not None,
                               chart_version=state.fetch_count,
                               connection_class=dot_class,
                               connection_text=connection_text,
                               refresh_enabled=state.refresh_enabled,
                               refresh_interval=app.config['REFRESH_INTERVAL'],
                               alert=state.pop_alert())

    @app.route('/')
    def index():
        """Login form, or the dashboard if this session already logged in"""
        if not is_logged_in(session):
            return render_template('login.html', version=__version__, error=None, username='')

        # Every page load runs one fetch cycle
        fetch_tank_data(dashboard_state(), app.config['API_URL'])
        return render_dashboard_page()

    @app.route('/login', methods=['POST'])
    def login():
        """Check the submitted credentials"""
        username = request.form.get('username', '')
        password = request.form.get('password', '')

        if attempt_login(session, username, password):
            logging.info("Login succeeded")
            return redirect(url_for('index'))

        logging.info("Login failed")
        # Password field is left empty on the re-rendered form
        return render_template('login.html', version=__version__,
                               error=LOGIN_ERROR_MESSAGE, username=username), 401

    @app.route('/logout')
    def logout_view():
        logout(session)
        return redirect(url_for('index'))

    @app.route('/refresh', methods=['POST'])
    @requires_login
    def refresh():
        """Manual refresh button"""
        state = dashboard_state()
        if state.refresh_enabled:
            fetch_tank_data(state, app.config['API_URL'])
        return redirect(url_for('dashboard'))

    @app.route('/dashboard')
    @requires_login
    def dashboard():
        """Show the current state without fetching"""
        return render_dashboard_page()

    @app.route('/api/status')
    @requires_login
    def api_status():
        """Current connection state and displayed values as JSON"""
        return jsonify(dashboard_state().get_snapshot())

    @app.route('/api/chart.png')
    @requires_login
    def chart_image():
        """Current history chart as PNG"""
        chart = dashboard_state().chart
        if chart is None or chart.destroyed:
            return Response('No chart', status=404)
        try:
            png = chart.to_png()
        except RuntimeError:
            # Replaced by a concurrent fetch while rendering
            return Response('No chart', status=404)
        return send_file(io.BytesIO(png), mimetype='image/png')

    return app

def main():
    """Main entry point"""
    file_config = load_config_file()

    parser = argparse.ArgumentParser(
        prog='tankdash.web',
        description='Web dashboard for the water tank'
    )
    parser.add_argument('--host', default=file_config.get('HOST', DEFAULT_HOST),
                       help=f'Host to bind to (default: {DEFAULT_HOST})')
    parser.add_argument('--port', type=int, default=file_config.get('PORT', DEFAULT_PORT),
                       help=f'Port to listen on (default: {DEFAULT_PORT})')
    parser.add_argument('--url', default=file_config.get('API_URL', API_URL),
                       help='Tank status endpoint URL')
    parser.add_argument('--interval', type=int,
                       default=file_config.get('REFRESH_INTERVAL', REFRESH_INTERVAL),
                       help=f'Page refresh interval seconds, 0 = manual only (default: {REFRESH_INTERVAL})')
    parser.add_argument('--debug', action='store_true',
                       help='Enable debug mode')
    parser.add_argument('--version', action='version',
                       version=f'%(prog)s {__version__}')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format='%(asctime)s - %(levelname)s - %(message)s'
    )

    app = create_app(api_url=args.url, refresh_interval=args.interval)

    print(f"Starting HTTP server on http://{args.host}:{args.port}/")
    print(f"Endpoint: {args.url}")
    if args.interval:
        print(f"Auto-refresh enabled: every {args.interval} seconds")
    else:
        print("Auto-refresh disabled: manual refresh only")

    app.run(host=args.host, port=args.port, debug=args.debug)

if __name__ == "__main__":
    main()
