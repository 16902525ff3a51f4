"""
Cadence UI Module

View-side collaborators the client core drives.
"""

from cadence.ui.appearance import Appearance
from cadence.ui.navigation import PlaybackState, Player, Router
from cadence.ui.view import ViewModel

__all__ = ["Appearance", "PlaybackState", "Player", "Router", "ViewModel"]
