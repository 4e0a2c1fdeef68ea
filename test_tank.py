#!/usr/bin/env python3
"""
Test script for the tank fetch cycle.
requests.get is patched, no network access is needed.
"""

import sys
import os
import threading
from unittest import mock

import requests

sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from tankdash.state import DashboardState, IDLE, CONNECTED, OFFLINE, CONFIG_ERROR
from tankdash.tank import get_tank_data, fetch_tank_data, TankPoller

URL = 'https://tank.example.com/prod/status'


def fake_response(status_code=200, payload=None, bad_json=False):
    """Build a stand-in for requests.Response"""
    response = mock.Mock()
    response.status_code = status_code
    response.ok = 200 <= status_code < 400  # requests counts 3xx as ok
    if bad_json:
        response.json.side_effect = ValueError("Expecting value: line 1 column 1 (char 0)")
    else:
        response.json.return_value = payload if payload is not None else {}
    return response


def test_get_tank_data_results():
    """Each failure kind maps to its own error type"""
    print("Testing get_tank_data results...")

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload={'level': 50})) as get:
        result = get_tank_data(URL)
        get.assert_called_once_with(URL, timeout=None)
    assert result == {'status': 'success', 'data': {'level': 50}}

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(503)):
        result = get_tank_data(URL)
    assert result['status'] == 'error'
    assert result['error_type'] == 'http'
    assert result['error_message'] == 'HTTP error! status: 503'

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(bad_json=True)):
        result = get_tank_data(URL)
    assert result['error_type'] == 'parse'
    assert result['error_message'].startswith('Parse error:')

    with mock.patch('tankdash.tank.requests.get', side_effect=requests.ConnectionError("refused")):
        result = get_tank_data(URL)
    assert result['error_type'] == 'network'
    assert 'refused' in result['error_message']

    with mock.patch('tankdash.tank.requests.get', side_effect=requests.Timeout()):
        result = get_tank_data(URL, timeout=5)
    assert result['error_type'] == 'network'
    assert result['error_message'] == 'Timeout after 5s'

    print("✓ get_tank_data tests passed")


def test_fetch_success():
    """A good response is rendered and marks the connection live"""
    print("Testing successful fetch cycle...")

    state = DashboardState()
    payload = {'level': 64, 'status': 'medium', 'distance': 40, 'device': 'tank-1'}
    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload=payload)):
        assert fetch_tank_data(state, URL) is True

    assert state.connection == CONNECTED
    assert state.view['percentage'] == '64%'
    assert state.view['status_text'] == 'Medium'
    assert state.refresh_enabled is True
    assert state.alert is None
    assert state.fetch_count == 1

    print("✓ successful fetch tests passed")


def test_fetch_http_error_keeps_previous_view():
    """A non-2xx response renders nothing and goes offline"""
    print("Testing HTTP error fetch cycle...")

    state = DashboardState()
    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload={'level': 30, 'status': 'low'})):
        fetch_tank_data(state, URL)
    previous_view = dict(state.view)

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(500, payload={'level': 99})):
        assert fetch_tank_data(state, URL) is False

    assert state.connection == OFFLINE
    assert state.view == previous_view
    assert state.refresh_enabled is True
    assert state.last_error == 'HTTP error! status: 500'

    alert = state.pop_alert()
    assert 'Please check' in alert
    assert alert.endswith('Error: HTTP error! status: 500')
    assert state.pop_alert() is None

    print("✓ HTTP error tests passed")


def test_fetch_network_and_parse_errors():
    """Transport and JSON failures take the same path"""
    state = DashboardState()
    with mock.patch('tankdash.tank.requests.get', side_effect=requests.ConnectionError("no route")):
        assert fetch_tank_data(state, URL) is False
    assert state.connection == OFFLINE
    assert state.view is None
    assert state.refresh_enabled is True
    assert 'no route' in state.pop_alert()

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(bad_json=True)):
        assert fetch_tank_data(state, URL) is False
    assert state.connection == OFFLINE
    assert 'Parse error' in state.pop_alert()

    print("✓ network and parse error tests passed")


def test_placeholder_url_skips_network():
    """An unconfigured URL aborts before any request"""
    state = DashboardState()
    with mock.patch('tankdash.tank.requests.get') as get:
        assert fetch_tank_data(state, 'https://YOUR_API_GATEWAY_URL/prod/status') is False
        get.assert_not_called()

    assert state.connection == CONFIG_ERROR
    assert state.connection_display()[1] == 'Not Configured'
    assert state.fetch_count == 0
    assert state.refresh_enabled is True
    assert 'not configured' in state.pop_alert()

    print("✓ placeholder URL tests passed")


def test_overlapping_fetches():
    """A second cycle runs to completion while the first is still pending"""
    print("Testing overlapping fetch cycles...")

    state = DashboardState()
    release_first = threading.Event()
    first_started = threading.Event()
    calls = []

    def slow_then_fast(url, timeout=None):
        calls.append(url)
        if len(calls) == 1:
            first_started.set()
            release_first.wait(5)
            return fake_response(500)
        return fake_response(payload={'level': 88, 'status': 'full'})

    results = {}
    with mock.patch('tankdash.tank.requests.get', side_effect=slow_then_fast):
        first = threading.Thread(target=lambda: results.setdefault('first', fetch_tank_data(state, URL)))
        first.start()
        assert first_started.wait(5)

        # Second cycle completes while the first is blocked
        assert fetch_tank_data(state, URL) is True
        assert state.connection == CONNECTED
        assert state.view['status_text'] == 'Full'
        assert first.is_alive()

        release_first.set()
        first.join(5)

    assert results['first'] is False
    # Last to complete wins
    assert state.connection == OFFLINE
    assert state.view['percentage'] == '88%'
    assert state.refresh_enabled is True
    assert len(calls) == 2

    print("✓ overlapping fetch tests passed")


def test_poller_single_run():
    """With no interval the poller fetches once and exits"""
    state = DashboardState()
    seen = []
    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload={'level': 12})):
        poller = TankPoller(state, URL, interval=0, on_cycle=lambda s, ok: seen.append(ok))
        poller.start()
        poller.join(5)

    assert not poller.is_alive()
    assert seen == [True]
    assert state.connection == CONNECTED
    print("✓ poller tests passed")


def test_initial_state():
    state = DashboardState()
    assert state.connection == IDLE
    assert state.get_snapshot()['connection_text'] == 'Idle'
    try:
        state.set_connection('bogus')
        assert False, "unknown state accepted"
    except ValueError:
        pass


def test_redirect_status_is_failure():
    """3xx responses are not 2xx, even though requests calls them ok"""
    print("Testing 3xx responses...")

    for status_code in (300, 304):
        state = DashboardState()
        response = fake_response(status_code, payload={'level': 77, 'status': 'full'})
        assert response.ok
        with mock.patch('tankdash.tank.requests.get', return_value=response):
            assert fetch_tank_data(state, URL) is False
        assert state.connection == OFFLINE
        assert state.view is None
        assert state.last_error == f'HTTP error! status: {status_code}'

    print("✓ 3xx tests passed")


def test_huge_history_level_renders():
    """An integer too large for a float is charted as a gap"""
    print("Testing oversized history level...")

    state = DashboardState()
    payload = {'level': 50, 'history': [{'timestamp': 1760900000000, 'level': 10 ** 400}]}
    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload=payload)):
        assert fetch_tank_data(state, URL) is True

    assert state.connection == CONNECTED
    assert state.view['percentage'] == '50%'
    assert state.chart is not None
    assert state.chart.values[0] != state.chart.values[0]  # NaN
    state.chart.destroy()

    print("✓ oversized level tests passed")


def test_render_failure_goes_offline():
    """A payload that cannot be rendered fails the cycle, keeping the old view"""
    state = DashboardState()
    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload={'level': 20})):
        fetch_tank_data(state, URL)
    previous_view = dict(state.view)

    with mock.patch('tankdash.tank.requests.get', return_value=fake_response(payload={'level': 90})), \
            mock.patch('tankdash.tank.render_dashboard', side_effect=RuntimeError("boom")):
        assert fetch_tank_data(state, URL) is False

    assert state.connection == OFFLINE
    assert state.view == previous_view
    assert state.refresh_enabled is True
    assert 'Render error: boom' in state.pop_alert()
    print("✓ render failure tests passed")


def test_poller_survives_failing_cycle():
    """An exception in one cycle does not end the timer"""
    print("Testing poller after a failing cycle...")

    state = DashboardState()
    seen = []
    outcomes = [RuntimeError("cycle blew up"), True]

    def next_outcome(*args, **kwargs):
        outcome = outcomes.pop(0)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome

    def record(s, ok):
        seen.append(ok)
        poller.stop()

    with mock.patch('tankdash.tank.fetch_tank_data', side_effect=next_outcome):
        poller = TankPoller(state, URL, interval=1, on_cycle=record)
        poller.start()
        poller.join(10)

    assert not poller.is_alive()
    assert seen == [True]
    assert outcomes == []
    print("✓ failing cycle tests passed")


def main():
    """Run all tests"""
    print("Fetch Cycle Test Suite")
    print("=" * 50)

    try:
        test_initial_state()
        test_get_tank_data_results()
        test_fetch_success()
        test_fetch_http_error_keeps_previous_view()
        test_fetch_network_and_parse_errors()
        test_placeholder_url_skips_network()
        test_overlapping_fetches()
        test_poller_single_run()
        test_redirect_status_is_failure()
        test_huge_history_level_renders()
        test_render_failure_goes_offline()
        test_poller_survives_failing_cycle()

        print("=" * 50)
        print("✓ All tests passed!")
        return 0

    except AssertionError as e:
        print(f"\n✗ Test failed: {e}")
        return 1


if __name__ == "__main__":
    sys.exit(main())
