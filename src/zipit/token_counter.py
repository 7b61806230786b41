"""Token counting for text dumps.

Token counts are an optional addition to the text dump, useful for judging whether
a project fits into a language model's context window. They are computed with
OpenAI's tiktoken library, which is installed through the 'token_counting' extra.
"""

import importlib.util
from typing import Any, Optional

from zipit.exceptions import TokenizationError, TokenizerNotAvailableError


class TokenCounter:
    """Token counter backed by a tiktoken encoding.

    Attributes:
        model (str): Name of the model whose tokenizer is used, e.g. "gpt-4".
        encoder (Any): The tiktoken encoding for the model.

    Raises:
        TokenizerNotAvailableError: If tiktoken is not installed.
        ValueError: If tiktoken has no tokenizer for the model.

    Example:
        >>> counter = TokenCounter("gpt-4")  # doctest: +SKIP
        >>> counter.count("Hello world")  # doctest: +SKIP
        2
    """

    def __init__(self, model: str):
        self.model = model
        if not self.is_available():
            raise TokenizerNotAvailableError()
        self.encoder: Any = self._get_encoder()

    @staticmethod
    def is_available() -> bool:
        """Check if the tiktoken library is installed."""
        return importlib.util.find_spec("tiktoken") is not None

    def _get_encoder(self) -> Any:
        import tiktoken

        try:
            return tiktoken.encoding_for_model(self.model)
        except KeyError:
            raise ValueError(
                f"Could not load tokenizer for model '{self.model}'. Consider using a "
                "well-supported model like 'gpt-4' (cl100k_base encoding) for an approximate count."
            )

    def count(self, text: str) -> int:
        """Count the tokens in ``text``.

        Raises:
            TokenizationError: If the encoder fails on the text.
        """
        try:
            return len(self.encoder.encode(text, disallowed_special=()))
        except Exception as e:
            raise TokenizationError(f"Failed to tokenize text: {str(e)}")


def create_token_counter(model: Optional[str]) -> Optional[TokenCounter]:
    """Create a counter for ``model``, or return None when counting is disabled."""
    if model is None:
        return None
    return TokenCounter(model)
