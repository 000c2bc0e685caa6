"""
Tokenizer module for token counting.

Keeps vault context passed to the assistant within the configured budget.
"""

from omnivault.config import TokenizerConfig
from omnivault.core.tokenizer.tokenizer import Tokenizer

__all__ = ["Tokenizer", "TokenizerConfig"]
