#!/usr/bin/env python3
"""
Canvas Due Date Wizard
======================
Run: python3 -m canvas_wizard.app
Then open: http://localhost:3000
"""
import logging

from flask import Flask
from flask_cors import CORS

from canvas_wizard.config import config, HOST, PORT, DEBUG, LOG_LEVEL
from canvas_wizard.routes import register_routes
from canvas_wizard.session_store import create_session_store
from canvas_wizard.services import dates

logger = logging.getLogger(__name__)


def _safe(fn):
    """Template filter that shows the raw value when it is not a valid date."""
    def wrapper(value):
        try:
            return fn(value)
        except (TypeError, ValueError):
            return value or ''
    wrapper.__name__ = fn.__name__
    return wrapper


def register_template_filters(app):
    app.add_template_filter(_safe(dates.format_short_date), 'short_date')
    app.add_template_filter(_safe(dates.format_long_date), 'long_date')
    app.add_template_filter(_safe(dates.format_time), 'due_time')
    app.add_template_filter(_safe(dates.input_date_value), 'input_date')
    app.add_template_filter(_safe(dates.input_time_value), 'input_time')


def create_app(store=None, settings=None):
    """
    Build the Flask app.

    Args:
        store: SessionStore to use (defaults to the SESSION_BACKEND store)
        settings: optional dict applied to the global Config
    """
    if settings:
        config.update(settings)

    logging.basicConfig(
        level=getattr(logging, LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    app = Flask(__name__, static_folder='static', static_url_path='/static')
    CORS(app)

    app.config['WIZARD_SESSION_STORE'] = store or create_session_store()
    register_template_filters(app)
    register_routes(app)

    logger.info("Canvas wizard ready (session backend: %s)", type(app.config['WIZARD_SESSION_STORE']).__name__)
    return app


def main():
    app = create_app()

    print()
    print("+" + "=" * 50 + "+")
    print("|  Canvas Due Date Wizard                          |")
    print("+" + "=" * 50 + "+")
    print("|                                                  |")
    print(f"|  Open in browser: http://localhost:{PORT:<14}|")
    print("|                                                  |")
    print("|  Press Ctrl+C to stop                            |")
    print("+" + "=" * 50 + "+")
    print()

    app.run(host=HOST, port=PORT, debug=DEBUG)


if __name__ == '__main__':
    main()
