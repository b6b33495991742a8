"""
Tests for utils.decorators module.
"""

import pytest

from imagematrix.core.patterns import create_solid
from imagematrix.exceptions import InvalidParameterException
from imagematrix.image.point import apply_threshold
from imagematrix.utils import timer


class TestTimer:
    """Tests for timer."""

    def test_records_elapsed_ms(self):
        """Test the elapsed time is written when the block exits."""
        with timer() as t:
            assert t["ms"] == 0.0
            apply_threshold(create_solid(8, 8, (10, 20, 30)), 100)

        assert t["ms"] >= 0

    def test_records_elapsed_ms_on_error(self):
        """Test a failing transform still reports its time."""
        with pytest.raises(InvalidParameterException):
            with timer() as t:
                t["ms"] = -1.0
                apply_threshold(create_solid(2, 2, (0, 0, 0)), 300)

        assert t["ms"] >= 0
