"""
Wizard Routes
=============

Route blueprints for the Canvas due date wizard.

Usage:
    from canvas_wizard.routes import register_routes
    register_routes(app)
"""
from .wizard_routes import wizard_bp


def register_routes(app):
    """Register all route blueprints with the Flask app."""
    app.register_blueprint(wizard_bp)


__all__ = [
    'register_routes',
    'wizard_bp',
]
