"""Writes claim events to the application log."""

from __future__ import annotations

import logging

from .base import BaseNotifier, ClaimEvent

logger = logging.getLogger(__name__)


class LogNotifier(BaseNotifier):
    name = "log"

    async def notify(self, event: ClaimEvent) -> bool:
        msg = self.format_message(event)
        logger.info("CLAIM:\n%s", msg)
        if event.activation_url:
            logger.debug("Activation URL for %s: %s", event.email, event.activation_url)
        return True
