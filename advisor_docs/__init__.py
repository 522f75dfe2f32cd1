"""Advisor document context engine.

Turns uploaded files into chunked text, keeps them in a per-process
repository and assembles token-budgeted context for advisor conversations.
"""

__version__ = "1.0.0"
