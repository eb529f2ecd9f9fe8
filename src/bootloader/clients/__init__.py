from bootloader.clients.director import DirectorClient, DirectorInfo
from bootloader.clients.retry import Retrier

__all__ = ["DirectorClient", "DirectorInfo", "Retrier"]
