"""Game domain services: sessions, simulation and timers.

This package contains the room lifecycle and physics that socket handlers
call into, keeping transport concerns separated from core game mechanics.
"""

from .settings import GameSettings
from .sessions import RoomStore, SessionManager

__all__ = ['GameSettings', 'RoomStore', 'SessionManager']
