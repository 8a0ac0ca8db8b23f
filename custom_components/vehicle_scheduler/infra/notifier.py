"""Notification sending and message templating through Home Assistant.

- Notifier sends a subject/body pair to a notify service address
- TemplateRenderer renders message templates with HA's template engine
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from homeassistant.helpers.template import Template

from ..scheduler_logging import get_logger

if TYPE_CHECKING:
    from homeassistant.core import HomeAssistant


class Notifier:
    """Sends notifications via ``notify.*`` services."""

    def __init__(self, hass: HomeAssistant) -> None:
        """Initialize notifier.

        Args:
            hass: Home Assistant instance
        """
        self.hass = hass
        self._logger = get_logger()

    async def async_send(self, address: str, subject: str, body: str) -> bool:
        """Send a notification.

        Args:
            address: Notify service, e.g. "notify.mobile_app_phone"
            subject: Notification title
            body: Notification message

        Returns:
            True if the service call went through
        """
        if not address:
            self._logger.warning("NOTIFY_ADDRESS_NOT_CONFIGURED")
            return False

        if "." not in address:
            self._logger.error("NOTIFY_ADDRESS_INVALID_FORMAT", address=address)
            return False

        domain, service = address.split(".", 1)

        try:
            await self.hass.services.async_call(
                domain,
                service,
                {"title": subject, "message": body},
                blocking=True,
            )
        except Exception as ex:
            self._logger.error("NOTIFICATION_FAILED", address=address, error=str(ex))
            return False

        self._logger.info("NOTIFICATION_SENT", address=address, length=len(body))
        return True


class TemplateRenderer:
    """Renders message templates; raises TemplateError on bad templates."""

    def __init__(self, hass: HomeAssistant) -> None:
        self.hass = hass

    def render(self, template: str) -> str:
        if not template:
            return ""
        return str(Template(template, self.hass).async_render(parse_result=False))
