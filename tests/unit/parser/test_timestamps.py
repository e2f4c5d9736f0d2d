from datetime import UTC, datetime

from walletexport.parser.utils.timestamps import from_unix, parse_iso


class TestParseIso:
    def test_zulu(self):
        assert parse_iso("2024-01-15T10:30:00Z") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    def test_nanoseconds_truncated(self):
        ts = parse_iso("2024-01-15T10:30:00.123456789Z")
        assert ts.microsecond == 123456

    def test_short_fraction_padded(self):
        assert parse_iso("2024-01-15T10:30:00.5Z").microsecond == 500000

    def test_naive_is_utc(self):
        assert parse_iso("2024-01-15T10:30:00").tzinfo is UTC

    def test_offset_converted_to_utc(self):
        assert parse_iso("2024-01-15T12:30:00+02:00") == datetime(2024, 1, 15, 10, 30, tzinfo=UTC)

    def test_unparsable(self):
        assert parse_iso("garbage") is None
        assert parse_iso("") is None
        assert parse_iso(None) is None
        assert parse_iso(1700000000) is None


class TestFromUnix:
    def test_seconds(self):
        assert from_unix("1700000000") == datetime(2023, 11, 14, 22, 13, 20, tzinfo=UTC)

    def test_nanoseconds(self):
        ts = from_unix("1700000000123456789", unit="ns")
        assert ts == datetime(2023, 11, 14, 22, 13, 20, 123456, tzinfo=UTC)

    def test_invalid(self):
        assert from_unix(None) is None
        assert from_unix("x") is None
        assert from_unix(0) is None
        assert from_unix(True) is None
