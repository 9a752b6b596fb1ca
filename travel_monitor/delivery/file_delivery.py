"""JSON-lines file notification center."""

import fcntl
import json
from datetime import datetime, timezone
from pathlib import Path

from ..config.delivery import FileDeliveryConfig
from ..platform.base import NotificationRequest
from .base import LocalNotificationCenter


class FileNotificationCenter(LocalNotificationCenter):
    """Appends each notification as one JSON object per line."""

    def __init__(self, name: str, config: FileDeliveryConfig):
        super().__init__(name, config.authorization, config.grant_on_request)
        self.config = config
        self.output_path = Path(config.output_path)

        if config.create_dirs:
            self.output_path.parent.mkdir(parents=True, exist_ok=True)

    def _present(self, request: NotificationRequest) -> None:
        record = {
            "id": request.identifier,
            "title": request.title,
            "body": request.body,
            "category": request.category,
            "sound": request.sound,
            "user_info": request.user_info,
            "presented_at": datetime.now(timezone.utc).isoformat(),
        }

        with open(self.output_path, "a") as f:
            fcntl.flock(f.fileno(), fcntl.LOCK_EX)
            json.dump(record, f, default=str)
            f.write("\n")

        self.logger.info(
            "Notification written to file",
            center=self.name,
            request_id=request.identifier,
            output_path=str(self.output_path)
        )

    def read_notifications(self) -> list[dict]:
        """Read back every notification written so far."""
        if not self.output_path.exists():
            return []
        with open(self.output_path) as f:
            return [json.loads(line) for line in f if line.strip()]

    def health_check(self) -> bool:
        """Check if file system is writable."""
        try:
            test_file = self.output_path.parent / ".health_check_test"
            test_file.write_text("test")
            test_file.unlink()
            return True

        except OSError as e:
            self.logger.warning(
                "Health check failed",
                center=self.name,
                error=str(e)
            )
            return False
