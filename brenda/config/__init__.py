"""
Configuration module for the Brenda voice assistant.

This module provides centralized configuration management for the backend and
the transport client, including constants, environment-backed settings and
logging setup.

Key components:
- constants: Application-wide constants such as provider endpoints, token
  lifetime, chat limits and realtime event type names.
- settings: Environment-backed settings, including the turn-detection policy
  and response cooldown exposed as operator configuration.
- logging_config: Console and rotating file logging for the application logger.

Usage examples:
```python
from brenda.config.constants import LOGGER_NAME, SESSION_TOKEN_TTL_SECONDS
from brenda.config.logging_config import configure_logging
from brenda.config.settings import load_settings

logger = configure_logging()
settings = load_settings()
logger.info(f"Realtime model: {settings.realtime_model}")
```
"""

# Config module initialization
