"""Standard output notification center."""

import json
import sys
from datetime import datetime, timezone
from typing import Optional

from ..config.delivery import StdoutDeliveryConfig
from ..platform.base import NotificationRequest
from .base import LocalNotificationCenter


class StdoutNotificationCenter(LocalNotificationCenter):
    """Prints each notification as one line on stdout."""

    def __init__(self, name: str = "stdout", config: Optional[StdoutDeliveryConfig] = None):
        config = config or StdoutDeliveryConfig()
        super().__init__(name, config.authorization, config.grant_on_request)
        self.config = config

    def _present(self, request: NotificationRequest) -> None:
        print(self._format_notification(request), file=sys.stdout, flush=True)
        self.logger.info("Notification printed to stdout", center=self.name,
                         request_id=request.identifier)

    def _format_notification(self, request: NotificationRequest) -> str:
        if self.config.format == "pretty":
            return f"[{datetime.now(timezone.utc).isoformat()}] {request.title}: {request.body}"

        payload = {
            "id": request.identifier,
            "title": request.title,
            "body": request.body,
            "category": request.category,
            "sound": request.sound,
            "user_info": request.user_info,
        }
        if self.config.include_timestamp:
            payload["stdout_timestamp"] = datetime.now(timezone.utc).isoformat()
        return json.dumps(payload)

    def health_check(self) -> bool:
        """Check if stdout is available."""
        try:
            return sys.stdout.writable()
        except (OSError, ValueError):
            return False
