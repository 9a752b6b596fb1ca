"""Configuration for the bundled notification centers."""

from dataclasses import dataclass
from enum import Enum
from typing import Any


class DeliveryMethod(Enum):
    """Supported notification center backends."""
    FILE_OUTPUT = "file_output"
    STDOUT = "stdout"


@dataclass(frozen=True)
class StdoutDeliveryConfig:
    """Configuration for stdout notifications."""
    format: str = "json"  # json, pretty
    include_timestamp: bool = True
    authorization: str = "not_determined"
    grant_on_request: bool = True


@dataclass(frozen=True)
class FileDeliveryConfig:
    """Configuration for json-lines file notifications."""
    output_path: str
    create_dirs: bool = True
    authorization: str = "not_determined"
    grant_on_request: bool = True


@dataclass(frozen=True)
class DeliveryDestination:
    """Notification center selection."""
    name: str
    method: DeliveryMethod
    config: Any  # StdoutDeliveryConfig | FileDeliveryConfig


def get_default_delivery_destination() -> DeliveryDestination:
    """Get the default notification destination."""
    return DeliveryDestination(
        name="stdout",
        method=DeliveryMethod.STDOUT,
        config=StdoutDeliveryConfig(
            format="json",
            include_timestamp=True
        )
    )


def create_file_destination(
    name: str,
    output_path: str,
    **kwargs
) -> DeliveryDestination:
    """Create file delivery destination."""
    return DeliveryDestination(
        name=name,
        method=DeliveryMethod.FILE_OUTPUT,
        config=FileDeliveryConfig(
            output_path=output_path,
            **kwargs
        )
    )
