"""Tests for custom exceptions."""

from zipit.exceptions import TokenizationError, TokenizerNotAvailableError


class TestExceptions:
    """Test the package exceptions."""

    def test_tokenizer_not_available_error(self):
        error = TokenizerNotAvailableError()
        assert "Tokenizer (tiktoken) is not installed" in str(error)
        assert "pip install zipit[token_counting]" in str(error)

    def test_tokenizer_not_available_error_custom_message(self):
        custom_message = "Custom tokenizer error"
        error = TokenizerNotAvailableError(custom_message)
        assert custom_message in str(error)
        assert "pip install zipit[token_counting]" in str(error)

    def test_tokenization_error(self):
        error = TokenizationError("Test tokenization failure")
        assert str(error) == "Test tokenization failure"
