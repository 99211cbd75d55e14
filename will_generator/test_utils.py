"""
Unit tests for utility functions.
"""

from datetime import datetime

import pytest

from will_generator.utils import (
    NUMBER_PLACEHOLDER, calculate_sha256, escape_text, format_long_date,
    or_placeholder, sanitize_filename, short_hash, to_number, to_words
)


class TestToWords:
    @pytest.mark.parametrize('value, expected', [
        (0, 'zero'),
        (7, 'seven'),
        (19, 'nineteen'),
        (20, 'twenty'),
        (45, 'forty-five'),
        (60, 'sixty'),
        (99, 'ninety-nine'),
        (100, 'one hundred'),
        ('40', 'forty'),
        (50.0, 'fifty'),
    ])
    def test_words(self, value, expected):
        assert to_words(value) == expected

    @pytest.mark.parametrize('value, expected', [
        (101, '101'),
        (33.5, '33.5'),
        (-5, '-5'),
    ])
    def test_literal_outside_range(self, value, expected):
        assert to_words(value) == expected

    @pytest.mark.parametrize('value', [None, '', '   '])
    def test_missing_is_placeholder(self, value):
        assert to_words(value) == NUMBER_PLACEHOLDER


class TestToNumber:
    def test_integral_float_becomes_int(self):
        assert to_number(30.0) == 30
        assert isinstance(to_number('30'), int)

    def test_unparseable(self):
        assert to_number('abc') is None
        assert to_number(True) is None


class TestHelpers:
    def test_or_placeholder(self):
        assert or_placeholder('  Ann  ', '[NAME]') == 'Ann'
        assert or_placeholder('', '[NAME]') == '[NAME]'
        assert or_placeholder(None, '[COUNTY]') == '[COUNTY]'

    def test_sha256(self):
        digest = calculate_sha256(b'will')
        assert len(digest) == 64
        assert short_hash(digest, 8) == digest[:8]
        assert short_hash('') == ''

    def test_escape_text(self):
        assert escape_text('Smith & Sons <Ltd>') == 'Smith &amp; Sons &lt;Ltd&gt;'
        assert escape_text('') == ''

    def test_sanitize_filename(self):
        assert sanitize_filename('Jane Q. Public') == 'Jane_Q_Public'
        assert sanitize_filename('') == 'Testator'
        assert sanitize_filename('***') == 'Testator'
        assert sanitize_filename(12345) == '12345'
        assert sanitize_filename(None) == 'Testator'

    def test_format_long_date(self):
        assert format_long_date(datetime(2026, 10, 8)) == 'October 8, 2026'
        assert format_long_date(None) == ''
