from bootloader.cloudconfig.generator import generate_cloud_config
from bootloader.cloudconfig.manager import CloudConfigManager

__all__ = ["CloudConfigManager", "generate_cloud_config"]
