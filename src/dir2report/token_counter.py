"""Line, character and token counts for produced reports.

Token counting relies on OpenAI's tiktoken library, installed through the
``token_counting`` extra. Without it, or without a model, the counter still
reports lines and characters and leaves the token count as None.
"""

import importlib.util
from collections import namedtuple
from typing import Any, Optional

from dir2report.exceptions import TokenizationError, TokenizerNotAvailableError

CountResult = namedtuple("CountResult", ["lines", "tokens", "characters"])


def check_tiktoken_available() -> bool:
    """Check if the tiktoken library is installed."""
    return importlib.util.find_spec("tiktoken") is not None


class TokenCounter:
    """Counter for lines, characters and (optionally) tokens.

    Totals accumulate across calls to :meth:`count`, so a report written in pieces
    (the report text, then a summary) can be counted piecewise.

    Attributes:
        model (Optional[str]): Model whose tokenizer is used, or None to skip tokens.
        encoder (Optional[Any]): The tiktoken encoding, when token counting is enabled.

    Example:
        >>> counter = TokenCounter()
        >>> counter.count("# Title\\nbody\\n")
        CountResult(lines=2, tokens=None, characters=13)
        >>> counter.count("more\\n").lines, counter.total_lines
        (1, 3)

    Raises:
        TokenizerNotAvailableError: If a model is given but tiktoken is not installed.
        ValueError: If tiktoken has no tokenizer for the model.
    """

    def __init__(self, model: Optional[str] = None) -> None:
        self.model = model
        self.encoder: Optional[Any] = self._load_encoder(model) if model is not None else None
        self.total_lines = 0
        self.total_characters = 0
        self.total_tokens: Optional[int] = 0 if self.encoder is not None else None

    @staticmethod
    def _load_encoder(model: str) -> Any:
        if not check_tiktoken_available():
            raise TokenizerNotAvailableError(
                "Token counting was requested with -t/--tokenizer, but tiktoken is not installed."
            )

        import tiktoken

        try:
            return tiktoken.encoding_for_model(model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{model}'. Consider a well-supported model "
                "such as 'gpt-4' (cl100k_base encoding) for an approximate count."
            )

    def count(self, text: str) -> CountResult:
        """Count a piece of text and add it to the running totals.

        Lines are counted as newline characters, so a report ending in a newline has
        as many lines as it displays.

        Raises:
            TokenizationError: If the tokenizer fails on the text.
        """
        lines = text.count("\n")
        characters = len(text)
        tokens = None

        self.total_lines += lines
        self.total_characters += characters

        if self.encoder is not None:
            try:
                tokens = len(self.encoder.encode(text, disallowed_special=()))
            except Exception as e:
                raise TokenizationError(f"Failed to tokenize text: {e}") from e
            self.total_tokens = (self.total_tokens or 0) + tokens

        return CountResult(lines=lines, tokens=tokens, characters=characters)
