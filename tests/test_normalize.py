"""Tests for the value normalisers."""

from __future__ import annotations

import pytest

from i2pd_exporter.scraper.errors import MalformedValue
from i2pd_exporter.scraper.models import ValueKind
from i2pd_exporter.scraper.normalize import (
    NORMALIZERS,
    enabled_value,
    normalize,
    parse_byte_rate,
    parse_byte_size,
    parse_count,
    parse_percentage,
    status_value,
)


class TestParseByteSize:
    @pytest.mark.parametrize(
        ("text", "expected"),
        [
            ("10.5 MiB", 11010048),
            ("512 B", 512),
            ("1 KiB", 1024),
            ("2 GiB", 2147483648),
            ("1.5 TiB", 1649267441664),
            ("800.25 KiB", 819456),
            ("  3 MiB ", 3145728),
            ("7MiB", 7340032),
        ],
    )
    def test_exact_conversion(self, text: str, expected: int) -> None:
        assert parse_byte_size(text) == expected

    def test_result_is_int(self) -> None:
        assert isinstance(parse_byte_size("10.5 MiB"), int)

    def test_fraction_rounds_to_nearest(self) -> None:
        # 1.001 KiB = 1025.024 bytes
        assert parse_byte_size("1.001 KiB") == 1025
        # 0.9999 KiB = 1023.8976 bytes
        assert parse_byte_size("0.9999 KiB") == 1024

    def test_large_values_stay_exact(self) -> None:
        # 2**52 + 1099511.627776 bytes
        assert parse_byte_size("4096.000001 TiB") == 4503599628470008

    @pytest.mark.parametrize("text", ["10.5 XiB", "10 MB", "10 kib", "10"])
    def test_unknown_unit_raises(self, text: str) -> None:
        with pytest.raises(MalformedValue):
            parse_byte_size(text)

    @pytest.mark.parametrize("text", ["abc MiB", "1.2.3 MiB", "-1 MiB", "nan MiB", ""])
    def test_non_numeric_mantissa_raises(self, text: str) -> None:
        with pytest.raises(MalformedValue):
            parse_byte_size(text)

    def test_rate_is_not_a_size(self) -> None:
        with pytest.raises(MalformedValue):
            parse_byte_size("1 KiB/s")

    def test_out_of_range_size_raises(self) -> None:
        with pytest.raises(MalformedValue, match="out of range"):
            parse_byte_size("100000000000000000000000000000 B")


class TestParseByteRate:
    def test_kib_per_second(self) -> None:
        assert parse_byte_rate("100.5 KiB/s") == 102912.0

    def test_bytes_per_second(self) -> None:
        assert parse_byte_rate("0 B/s") == 0.0

    def test_fractional_result_kept(self) -> None:
        assert parse_byte_rate("0.5 B/s") == 0.5

    def test_size_is_not_a_rate(self) -> None:
        with pytest.raises(MalformedValue):
            parse_byte_rate("100 KiB")

    def test_unknown_unit_raises(self) -> None:
        with pytest.raises(MalformedValue):
            parse_byte_rate("3 XiB/s")


class TestParsePercentage:
    def test_integer_percent(self) -> None:
        assert parse_percentage("37%") == 37.0

    def test_decimal_percent_with_space(self) -> None:
        assert parse_percentage(" 37.5 % ") == 37.5

    def test_without_sign(self) -> None:
        assert parse_percentage("80") == 80.0

    @pytest.mark.parametrize("text", ["%", "n/a%", "37%%"])
    def test_non_numeric_raises(self, text: str) -> None:
        with pytest.raises(MalformedValue):
            parse_percentage(text)


class TestParseCount:
    def test_digits(self) -> None:
        assert parse_count(" 3017 ") == 3017

    @pytest.mark.parametrize("text", ["3,017", "-1", "12.0", ""])
    def test_rejects_non_integers(self, text: str) -> None:
        with pytest.raises(MalformedValue):
            parse_count(text)


class TestStatusMappers:
    def test_ok_is_one(self) -> None:
        assert status_value("OK") == 1
        assert status_value(" OK ") == 1

    @pytest.mark.parametrize("text", ["Firewalled", "Testing", "Unknown", "ok", ""])
    def test_anything_else_is_zero(self, text: str) -> None:
        assert status_value(text) == 0

    def test_enabled(self) -> None:
        assert enabled_value("enabled") == 1
        assert enabled_value("Enabled") == 1

    @pytest.mark.parametrize("text", ["disabled", "Disabled", "whatever"])
    def test_not_enabled_is_zero(self, text: str) -> None:
        assert enabled_value(text) == 0


class TestDispatch:
    def test_every_value_kind_has_a_normalizer(self) -> None:
        assert set(NORMALIZERS) == set(ValueKind)

    def test_constant_ignores_text(self) -> None:
        assert normalize(ValueKind.CONSTANT, "LU") == 1

    def test_routes_to_byte_size(self) -> None:
        assert normalize(ValueKind.BYTE_SIZE, "1 KiB") == 1024
