"""
Token counting utilities for prompt context budgeting.

Uses tiktoken for accurate OpenAI-compatible token counting with a
character-based approximation as the cheap path.
"""

from collections.abc import Iterable

import tiktoken

from omnivault.config import TokenizerConfig


class Tokenizer:
    """
    Token counter used to keep vault context within a prompt budget.

    Usage:
        tokenizer = Tokenizer()
        count = tokenizer.count_tokens("Hello world")
        blocks = tokenizer.fit_to_budget(note_blocks, budget=8000)
    """

    def __init__(self, config: TokenizerConfig | None = None):
        """
        Initialize tokenizer with configuration.

        Args:
            config: Optional tokenizer configuration. Uses defaults if not provided.
        """
        self.config = config or TokenizerConfig()
        self._encoder: tiktoken.Encoding | None = None

    @property
    def encoder(self) -> tiktoken.Encoding:
        """Lazy-load tiktoken encoder."""
        if self._encoder is None:
            self._encoder = tiktoken.get_encoding(self.config.model)
        return self._encoder

    def count_tokens(self, text: str) -> int:
        """
        Count tokens for text.

        Args:
            text: Text to count tokens for

        Returns:
            Exact token count (approximate when configured so)
        """
        if not text:
            return 0

        if self.config.provider == "approximate":
            return self.estimate_tokens(text)

        return len(self.encoder.encode(text))

    def estimate_tokens(self, text: str) -> int:
        """
        Fast approximate token count using character ratio.

        Args:
            text: Text to estimate tokens for

        Returns:
            Approximate token count
        """
        if not text:
            return 0
        return int(len(text) / self.config.chars_per_token)

    def truncate(self, text: str, max_tokens: int) -> str:
        """
        Cut text down to at most max_tokens tokens.

        Args:
            text: Text to truncate
            max_tokens: Token limit

        Returns:
            Text unchanged if within the limit, else its leading part
        """
        if max_tokens <= 0 or not text:
            return ""

        if self.config.provider == "approximate":
            max_chars = int(max_tokens * self.config.chars_per_token)
            return text[:max_chars]

        tokens = self.encoder.encode(text)
        if len(tokens) <= max_tokens:
            return text
        return self.encoder.decode(tokens[:max_tokens])

    def fit_to_budget(self, blocks: Iterable[str], budget: int) -> list[str]:
        """
        Select blocks in priority order within a token budget.

        A block that does not fit is skipped so smaller later blocks can
        still be taken. Budget left over at the end goes to the first skipped
        block, truncated, so an oversized block still contributes its start.

        Args:
            blocks: Text blocks in priority order
            budget: Total token budget

        Returns:
            Selected blocks, in their original order
        """
        blocks = list(blocks)
        selected: list[tuple[int, str]] = []
        first_skipped: int | None = None
        used = 0
        for index, block in enumerate(blocks):
            cost = self.count_tokens(block)
            if used + cost <= budget:
                selected.append((index, block))
                used += cost
            elif first_skipped is None:
                first_skipped = index

        if first_skipped is not None and used < budget:
            head = self.truncate(blocks[first_skipped], budget - used)
            if head:
                selected.append((first_skipped, head))

        return [block for _, block in sorted(selected)]
