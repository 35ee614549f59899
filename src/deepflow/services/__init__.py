"""Services module for DeepFlow - wiring and host integration."""

from .config_service import ConfigService, get_config_service
from .focus_service import FocusService, get_focus_service
from .notification_service import Notifier

__all__ = [
    "ConfigService",
    "FocusService",
    "Notifier",
    "get_config_service",
    "get_focus_service",
]
