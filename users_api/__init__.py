"""
users_api: Fixed user record over HTTP, with every request access-logged
through a LogRouter.
"""

from users_api.api import create_app, run_server
from users_api.config import ConfigError, Settings, load_config

__all__ = ['ConfigError', 'Settings', 'create_app', 'load_config', 'run_server']
__version__ = '1.0.0'
