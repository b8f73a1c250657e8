"""
Minecraft host adapter: players, permissions and shutdown over RCON.
"""

from .host import MinecraftHost, MinecraftPlayer
from .rcon import RconConsole

__all__ = [
    "MinecraftHost",
    "MinecraftPlayer",
    "RconConsole",
]
