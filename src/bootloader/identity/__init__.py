"""Environment identity: naming and uniqueness."""

from bootloader.identity.names import generate_env_name, is_valid_name
from bootloader.identity.resolver import EnvIDResolver

__all__ = ["EnvIDResolver", "generate_env_name", "is_valid_name"]
