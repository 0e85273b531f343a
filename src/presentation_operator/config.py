"""Operator settings.

Settings are built once by the CLI from command-line options (with
environment variable fallbacks) and handed to the reconciler and store.
"""

from dataclasses import dataclass

DEFAULT_IMAGE = "manueldewald/presentation"
DEFAULT_CONTAINER_NAME = "slides"
DEFAULT_MOUNT_PATH = "/config"
DEFAULT_REQUEST_TIMEOUT = 30.0


@dataclass(frozen=True, slots=True)
class OperatorSettings:
    """Tunables for derived pods and store requests.

    Attributes:
        image: Image of the slides container.
        container_name: Name of the slides container.
        mount_path: Where the ConfigMap is mounted inside the container.
        request_timeout: Per-request deadline in seconds for store calls.

    """

    image: str = DEFAULT_IMAGE
    container_name: str = DEFAULT_CONTAINER_NAME
    mount_path: str = DEFAULT_MOUNT_PATH
    request_timeout: float = DEFAULT_REQUEST_TIMEOUT

    def __post_init__(self) -> None:
        if not self.image:
            raise ValueError("Container image cannot be empty")
        if not self.container_name:
            raise ValueError("Container name cannot be empty")
        if not self.mount_path.startswith("/"):
            raise ValueError(f"Mount path must be absolute, got '{self.mount_path}'")
        if self.request_timeout <= 0:
            raise ValueError(f"Request timeout must be positive, got {self.request_timeout}")
