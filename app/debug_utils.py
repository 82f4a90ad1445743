"""
Debug helpers for the Biodiversity Hub application.

Debug output is controlled by environment switches so it can be turned on
in a running container without code changes:

- BIODIVERSITY_DEBUG: general debug logging
- BIODIVERSITY_DEBUG_AUTH: sign-in / session flow
- BIODIVERSITY_DEBUG_REQUESTS: one line per request
"""

import os
import logging
import time
from functools import wraps
from typing import Optional, Dict, Any

from flask import request, g, current_app


def _flag(name: str) -> bool:
    return os.getenv(name, 'false').lower() in ['true', 'on', '1']


class DebugManager:
    """Manages debug mode state and logging."""

    def __init__(self):
        self.logger = logging.getLogger('biodiversity.debug')

        if not self.logger.handlers:
            handler = logging.StreamHandler()
            formatter = logging.Formatter(
                '🐛 [%(asctime)s] %(levelname)s - %(name)s - %(message)s',
                datefmt='%Y-%m-%d %H:%M:%S'
            )
            handler.setFormatter(formatter)
            self.logger.addHandler(handler)
            self.logger.setLevel(logging.DEBUG)
            self.logger.propagate = False

    def is_debug_enabled(self) -> bool:
        return _flag('BIODIVERSITY_DEBUG')

    def is_auth_debug_enabled(self) -> bool:
        return self.is_debug_enabled() or _flag('BIODIVERSITY_DEBUG_AUTH')

    def is_request_debug_enabled(self) -> bool:
        return _flag('BIODIVERSITY_DEBUG_REQUESTS')

    def log_debug(self, message: str, category: str = "GENERAL", extra_data: Optional[Dict[str, Any]] = None):
        """Log debug message with category and optional extra data."""
        if category == "AUTH":
            if not self.is_auth_debug_enabled():
                return
        elif not self.is_debug_enabled():
            return

        request_path = None
        try:
            request_path = request.path
        except RuntimeError:
            # Outside of a request context
            pass

        if extra_data:
            self.logger.debug(f"[{category}] {message} | path={request_path} | Extra: {extra_data}")
        else:
            self.logger.debug(f"[{category}] {message} | path={request_path}")


debug_manager = None


def get_debug_manager() -> DebugManager:
    """Get the global debug manager instance."""
    global debug_manager
    if debug_manager is None:
        debug_manager = DebugManager()
    return debug_manager


def debug_log(message: str, category: str = "GENERAL", extra_data: Optional[Dict[str, Any]] = None):
    """Convenience function for debug logging."""
    get_debug_manager().log_debug(message, category, extra_data)


def debug_auth(message: str, extra_data: Optional[Dict[str, Any]] = None):
    debug_log(message, "AUTH", extra_data)


def debug_route(name: str):
    """Decorator logging entry into a view under the given category."""
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            debug_log(f"→ {request.method} {request.path} ({func.__name__})", name, kwargs or None)
            return func(*args, **kwargs)
        return wrapper
    return decorator


def setup_debug_logging():
    """Raise the log level of the app loggers when debug mode is on."""
    if get_debug_manager().is_debug_enabled():
        level_name = os.getenv('BIODIVERSITY_DEBUG_LOG_LEVEL', 'DEBUG').upper()
        level = getattr(logging, level_name, logging.DEBUG)
        logging.getLogger('app').setLevel(level)
        current_app.logger.setLevel(level)


def print_debug_banner():
    if get_debug_manager().is_debug_enabled():
        print("🐛 Debug mode is ON (BIODIVERSITY_DEBUG). Do not run like this in production.")


def register_request_logging(app):
    """Log one line per request when BIODIVERSITY_DEBUG_REQUESTS is set."""

    @app.before_request
    def _start_timer():
        g._request_started = time.monotonic()

    @app.after_request
    def _log_request(response):
        if get_debug_manager().is_request_debug_enabled():
            started = getattr(g, '_request_started', None)
            elapsed_ms = (time.monotonic() - started) * 1000 if started else 0.0
            get_debug_manager().logger.info(
                f"[REQUEST] {request.method} {request.path} -> {response.status_code} ({elapsed_ms:.1f} ms)"
            )
        return response
