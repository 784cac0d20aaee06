"""Tests for amount formatting."""

from __future__ import annotations

import pytest

from delegate_notifier.utils.formatting import format_satoshi


class TestFormatSatoshi:
    @pytest.mark.parametrize(
        ("amount", "expected"),
        [
            (0, "0 Ѧ"),
            (100_000_000, "1 Ѧ"),
            (150_000_000, "1.5 Ѧ"),
            (1, "0.00000001 Ѧ"),
            (1_234_567_890_000, "12,345.6789 Ѧ"),
            ("250000000", "2.5 Ѧ"),
        ],
    )
    def test_format(self, amount: int | str, expected: str) -> None:
        assert format_satoshi(amount) == expected

    def test_custom_symbol(self) -> None:
        assert format_satoshi(100_000_000, "DѦ") == "1 DѦ"
