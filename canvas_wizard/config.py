"""
Configuration management for the Canvas due date wizard.
"""
import os
from pathlib import Path
from dotenv import load_dotenv

# Load environment variables
load_dotenv()

# Base paths
BASE_DIR = Path(__file__).parent.parent
PACKAGE_DIR = Path(__file__).parent

# User data
HOME_DIR = Path.home()
WIZARD_DATA_DIR = HOME_DIR / ".canvas_wizard"
SESSION_FILE = os.getenv("SESSION_FILE", str(WIZARD_DATA_DIR / "sessions.json"))
AUDIT_LOG_FILE = os.getenv("AUDIT_LOG_FILE", str(HOME_DIR / ".canvas_wizard_audit.log"))

# AI configuration
GEMINI_MODEL = os.getenv("GEMINI_MODEL", "gemini-2.0-flash")
CLAUDE_MODEL = os.getenv("CLAUDE_MODEL", "claude-haiku-4-5-20251001")
AI_TEMPERATURE = float(os.getenv("AI_TEMPERATURE", "0.1"))
AI_MAX_TOKENS = int(os.getenv("AI_MAX_TOKENS", "2048"))
AI_PROVIDERS = ['gemini', 'claude']
DEFAULT_AI_PROVIDER = 'gemini'

# Canvas configuration
DEFAULT_CANVAS_URL = os.getenv("DEFAULT_CANVAS_URL", "https://mdc.instructure.com/api/v1")
CANVAS_TIMEOUT = float(os.getenv("CANVAS_TIMEOUT", "30"))
CANVAS_PER_PAGE = 100

# Session configuration
SESSION_BACKEND = os.getenv("SESSION_BACKEND", "memory")  # memory | file
SESSION_TTL = int(os.getenv("SESSION_TTL", "7200"))  # 2 hours
SESSION_COOKIE = os.getenv("SESSION_COOKIE", "wizard_session")

# Server configuration
HOST = os.getenv("HOST", "0.0.0.0")
PORT = int(os.getenv("PORT", "3000"))
DEBUG = os.getenv("DEBUG", "false").lower() in ("1", "true", "yes")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")


class Config:
    """Application configuration class."""

    def __init__(self):
        self.gemini_model = GEMINI_MODEL
        self.claude_model = CLAUDE_MODEL
        self.ai_temperature = AI_TEMPERATURE
        self.ai_max_tokens = AI_MAX_TOKENS
        self.default_canvas_url = DEFAULT_CANVAS_URL
        self.canvas_timeout = CANVAS_TIMEOUT
        self.session_backend = SESSION_BACKEND
        self.session_file = SESSION_FILE
        self.session_ttl = SESSION_TTL
        self.session_cookie = SESSION_COOKIE
        self.audit_log_file = AUDIT_LOG_FILE

    def to_dict(self):
        return {
            "gemini_model": self.gemini_model,
            "claude_model": self.claude_model,
            "ai_temperature": self.ai_temperature,
            "ai_max_tokens": self.ai_max_tokens,
            "default_canvas_url": self.default_canvas_url,
            "canvas_timeout": self.canvas_timeout,
            "session_backend": self.session_backend,
            "session_file": self.session_file,
            "session_ttl": self.session_ttl,
            "session_cookie": self.session_cookie,
            "audit_log_file": self.audit_log_file,
        }

    def update(self, data: dict):
        for key, value in data.items():
            if hasattr(self, key):
                setattr(self, key, value)


# Global config instance
config = Config()
