"""
Canvas Due Date Wizard
======================

Flask app that re-dates Canvas LMS assignments with AI-assisted matching.

Structure:
- routes/: wizard blueprint (form actions + AJAX side channels)
- services/: AI gateway, schedule generator, Canvas updater, audit log
- session_store.py: pluggable server-side session storage
- config.py: Configuration management
"""

from .config import config, Config

__version__ = "1.0.0"

__all__ = ['config', 'Config']
