"""
OmniVault - personal knowledge vault.

Notes with tags, [[mentions]] and heuristic relations, persisted to local
key-value storage, with generative-AI chat, research, lookup, illustration
and audio briefings behind an injected provider.
"""

__version__ = "1.0.0"
