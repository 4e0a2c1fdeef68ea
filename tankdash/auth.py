"""
Login gate for the dashboard

This is a convenience gate, not access control: the credential pair is a
literal compared in cleartext, and a logged-in session is one flag.
"""
from functools import wraps

from flask import redirect, session, url_for

from tankdash.config import USERNAME, PASSWORD

SESSION_FLAG = 'logged_in'

def check_auth(username, password):
    """Check if username/password is valid"""
    return (username or '').strip() == USERNAME and password == PASSWORD

def attempt_login(session_store, username, password):
    """
    Try to log in with the given credentials.

    Sets the session flag and returns True on a match. On a mismatch the
    flag is left as it was and False is returned. There is no lockout
    after repeated failures.
    """
    if not check_auth(username, password):
        return False
    session_store[SESSION_FLAG] = True
    return True

def is_logged_in(session_store):
    """True if an earlier login in this session succeeded"""
    return bool(session_store.get(SESSION_FLAG))

def logout(session_store):
    """Forget the login"""
    session_store.pop(SESSION_FLAG, None)

def requires_login(f):
    """Decorator sending anonymous visitors to the login form"""
    @wraps(f)
    def decorated(*args, **kwargs):
        if not is_logged_in(session):
            return redirect(url_for('index'))
        return f(*args, **kwargs)
    return decorated
