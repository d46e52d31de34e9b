"""Configuration enums for type-safe settings.

These enums provide type safety and IDE autocomplete for configuration values.
They inherit from str to maintain JSON serialization compatibility.
"""

from enum import Enum


class Environment(str, Enum):
    """Deployment environments.

    Controls environment-specific behavior like logging format and which
    adapters the container wires (in-memory vs. networked).
    """

    LOCAL = "local"
    TEST = "test"
    DEV = "dev"
    PRD = "prd"
