from unittest.mock import MagicMock, patch

import pytest

from zipit.exceptions import TokenizationError, TokenizerNotAvailableError
from zipit.token_counter import TokenCounter, create_token_counter


@pytest.fixture
def mock_tiktoken_available():
    with patch("importlib.util.find_spec", return_value=True):
        yield


@pytest.fixture
def mock_tiktoken_unavailable():
    with patch("importlib.util.find_spec", return_value=None):
        yield


@pytest.fixture
def mock_encoder():
    encoder = MagicMock()
    encoder.encode.side_effect = lambda text, **kwargs: text.split()
    return encoder


@pytest.fixture
def counter(mock_tiktoken_available, mock_encoder):
    with patch.object(TokenCounter, "_get_encoder", return_value=mock_encoder):
        yield TokenCounter(model="gpt-4")


def test_token_counter_unavailable(mock_tiktoken_unavailable):
    with pytest.raises(TokenizerNotAvailableError):
        TokenCounter(model="gpt-4")


def test_count(counter, mock_encoder):
    assert counter.count("Hello big world") == 3
    assert counter.count("again") == 1
    mock_encoder.encode.assert_called_with("again", disallowed_special=())


def test_count_wraps_encoder_errors(counter, mock_encoder):
    mock_encoder.encode.side_effect = RuntimeError("encoder exploded")
    with pytest.raises(TokenizationError, match="encoder exploded"):
        counter.count("text")


def test_unknown_model(mock_tiktoken_available):
    fake_tiktoken = MagicMock()
    fake_tiktoken.encoding_for_model.side_effect = KeyError("no-such-model")
    with patch.dict("sys.modules", {"tiktoken": fake_tiktoken}):
        with pytest.raises(ValueError, match="Could not load tokenizer for model 'no-such-model'"):
            TokenCounter(model="no-such-model")


def test_create_token_counter(mock_tiktoken_available, mock_encoder):
    assert create_token_counter(None) is None
    with patch.object(TokenCounter, "_get_encoder", return_value=mock_encoder):
        counter = create_token_counter("gpt-4")
    assert isinstance(counter, TokenCounter)
    assert counter.model == "gpt-4"
