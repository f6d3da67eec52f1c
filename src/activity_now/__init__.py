"""Activity discovery and ranking.

Decides which activities to surface "right now" for a location, given
opening hours, a short-range rain forecast and optional personal history.
"""

__version__ = "0.1.0"
