"""
Cadence - client core of the Cadence desktop media player.

Connection bootstrap, settings synchronization and host directive dispatch.
"""
from cadence.version import __version__
