"""Infrastructure module - HA integration utilities.

Contains:
- Notifier: Notification sending
- TemplateRenderer: Message template rendering
"""

from .notifier import Notifier, TemplateRenderer

__all__ = ["Notifier", "TemplateRenderer"]
