class TokenizerNotAvailableError(Exception):
    """
    Exception raised when token counting is requested without the required tokenizer package.

    The `tiktoken` package is an optional dependency that must be installed through the
    'token_counting' extra before `zipit txt --tokenizer MODEL` can be used.

    Attributes:
        message (str): Detailed error message including installation instructions.

    Example:
        >>> error = TokenizerNotAvailableError()
        >>> str(error).startswith('Tokenizer (tiktoken) is not installed')
        True
    """

    def __init__(self, message: str = "Tokenizer (tiktoken) is not installed.") -> None:
        self.message = (
            f"{message} To enable token counting, install zipit with the 'token_counting' "
            "extra: 'pip install zipit[token_counting]'."
        )
        super().__init__(self.message)


class TokenizationError(Exception):
    """
    Exception raised when the tokenizer is available but fails to encode a piece of text.

    Example:
        >>> error = TokenizationError("Failed to tokenize: invalid input")
        >>> str(error)
        'Failed to tokenize: invalid input'
    """

    pass
