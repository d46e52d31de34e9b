"""Dependency Injection Container Module.

Usage:
------
    # Initialize at startup (call once from the FastAPI lifespan)
    from usagegate.core.container import initialize_container
    from usagegate.core.config import settings
    initialize_container(settings)

    # Import the global container after initialization
    from usagegate.core import container as container_mod
    service = container_mod.container.rate_limit_service

    # In tests (construct directly with fakes, don't use global)
    from usagegate.core.container import Container
    test_container = Container(rate_limit_service=FakeRateLimitService(), ...)

Module structure:
-----------------
    container/
    ├── __init__.py      # This file - exports public API
    ├── container.py     # Container dataclass (serves)
    └── factory.py       # create_container() (builds)
"""

from typing import TYPE_CHECKING

from usagegate.core.container.container import Container
from usagegate.core.container.factory import create_container

if TYPE_CHECKING:
    from usagegate.core.config import Settings

__all__ = ["Container", "create_container", "container", "initialize_container"]


container: Container | None = None
"""Global container instance, set by ``initialize_container()``.

Domain code never imports this; it receives dependencies as parameters.
"""


def initialize_container(settings: "Settings") -> Container:
    """Initialize the global container. Call once at startup.

    Raises:
        RuntimeError: If the container is already initialized.
    """
    global container

    if container is not None:
        raise RuntimeError(
            "Container already initialized. "
            "initialize_container() should only be called once at startup."
        )

    container = create_container(settings)
    return container


def reset_container() -> None:
    """Reset the global container to None. For shutdown and tests."""
    global container
    container = None
