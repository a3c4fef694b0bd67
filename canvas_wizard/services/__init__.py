"""
Wizard Services
===============

Business logic for the Canvas due date wizard.

Services:
- ai_gateway: Gemini / Claude matching, chat and suggestions
- schedule_service: fixed Fall 2025 schedule
- canvas_service: Canvas assignment lookup and due date updates
- audit: action audit log
"""

# Services are imported directly when needed to avoid circular imports
# Example: from canvas_wizard.services.ai_gateway import AIGateway

__all__ = [
    'ai_gateway',
    'schedule_service',
    'canvas_service',
    'audit',
    'dates',
]
