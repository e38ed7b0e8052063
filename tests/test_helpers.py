"""Unit tests for utility helpers."""
import pytest

from cex_sdk.utils.helpers import (
    extract_base_currency,
    extract_quote_currency,
    format_duration,
    parse_float_from_string,
)


class TestCurrencyExtraction:
    """Tests for the symbol currency heuristic."""

    @pytest.mark.parametrize('symbol,base,quote', [
        ('btcusd', 'BTC', 'USD'),
        ('ethusd', 'ETH', 'USD'),
        ('ltcbtc', 'LTC', 'BTC'),
        ('ethbtc', 'ETH', 'BTC'),
        ('dogusd', 'DOG', 'USD'),
        ('adausd', 'ADA', 'USD'),
        ('adaeth', 'ADA', 'ETH'),
        ('BTCUSD', 'BTC', 'USD'),
        ('btceur', 'BTC', 'EUR'),
        ('ethdai', 'ETH', 'DAI'),
    ])
    def test_known_quotes(self, symbol, base, quote):
        """Symbols ending in a known quote split at the quote."""
        assert extract_base_currency(symbol) == base
        assert extract_quote_currency(symbol) == quote

    def test_longest_quote_wins(self):
        """gusd is preferred over its usd suffix."""
        assert extract_base_currency('btcgusd') == 'BTC'
        assert extract_quote_currency('btcgusd') == 'GUSD'

    def test_unknown_long_symbol(self):
        """Unknown symbols of six or more characters split three and three."""
        assert extract_base_currency('newcoin') == 'NEW'
        assert extract_quote_currency('newcoin') == 'OIN'

    def test_unknown_short_symbol(self):
        """Short unknown symbols are all base, quoted in USD."""
        assert extract_base_currency('short') == 'SHORT'
        assert extract_quote_currency('short') == 'USD'

    def test_bare_quote_symbol(self):
        """A symbol that is only a quote currency keeps a non-empty base."""
        assert extract_base_currency('usd') == 'USD'
        assert extract_quote_currency('usd') == 'USD'


class TestParseFloat:
    """Tests for decimal string parsing."""

    @pytest.mark.parametrize('value,expected', [
        ('123.45', 123.45),
        ('0', 0.0),
        ('', 0.0),
        ('  123.45  ', 123.45),
        (None, 0.0),
    ])
    def test_valid(self, value, expected):
        """Numbers parse, empty input is zero."""
        assert parse_float_from_string(value) == expected

    def test_invalid(self):
        """Non-numeric input raises ValueError."""
        with pytest.raises(ValueError):
            parse_float_from_string('invalid')


@pytest.mark.parametrize('seconds,expected', [
    (0.25, '250ms'),
    (1.5, '1.5s'),
    (120, '2m'),
    (5400, '1.5h'),
])
def test_format_duration(seconds, expected):
    """Durations pick a readable unit."""
    assert format_duration(seconds) == expected
