"""
Unit tests for log parsers.

Tests deterministic extraction of each wire format.
"""

import pytest
from datetime import datetime, timedelta, timezone

from logparser.core.exceptions import ConfigurationError
from logparser.data.parsers import (
    DecodeError,
    JSONLineParser,
    LogfmtLineParser,
    ParsingError,
    TextLineParser,
    get_parser,
    parse_lines,
)
from logparser.data.schema import LogFormat, LogLevel


def _is_recent(ts: datetime) -> bool:
    return abs(datetime.now(timezone.utc) - ts) < timedelta(minutes=1)


class TestJSONLineParser:
    """Test JSON line extraction."""

    def test_standard_fields(self):
        """Test the canonical structured example."""
        parser = JSONLineParser()
        line = (
            '{"timestamp":"2024-01-02T15:04:05Z","level":"ERROR",'
            '"message":"Database connection failed","service":"api"}'
        )

        result = parser.parse_line(line)

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert result.level == LogLevel.ERROR
        assert result.message == "Database connection failed"
        assert result.fields == {"service": "api"}

    def test_alternate_keys(self):
        """Test the second-choice key names."""
        parser = JSONLineParser()
        line = '{"@timestamp":"2024-01-02 15:04:05","severity":"wrn","msg":"Disk almost full"}'

        result = parser.parse_line(line)

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert result.level == LogLevel.WARN
        assert result.message == "Disk almost full"
        assert result.fields == {}

    def test_dotted_level_and_log_message(self):
        parser = JSONLineParser()

        result = parser.parse_line('{"log.level":"ftl","log":"out of memory"}')

        assert result.level == LogLevel.FATAL
        assert result.message == "out of memory"

    def test_epoch_timestamp(self):
        parser = JSONLineParser()

        result = parser.parse_line('{"ts":1704207845,"msg":"tick"}')

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert "ts" not in result.fields

    def test_unparseable_timestamp_kept_and_next_key_tried(self):
        """Test that a bad candidate stays in fields and the next key is used."""
        parser = JSONLineParser()

        result = parser.parse_line('{"timestamp":"yesterday","time":"2024-01-02T15:04:05Z"}')

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert result.fields == {"timestamp": "yesterday"}

    def test_missing_timestamp_defaults_to_now(self):
        parser = JSONLineParser()

        result = parser.parse_line('{"message":"no time"}')

        assert _is_recent(result.timestamp)

    def test_missing_level_and_message_defaults(self):
        parser = JSONLineParser()

        result = parser.parse_line('{"service":"api"}')

        assert result.level == LogLevel.INFO
        assert result.message == ""
        assert result.fields == {"service": "api"}

    def test_non_string_level_stays_in_fields(self):
        """Test that only string levels are lifted."""
        parser = JSONLineParser()

        result = parser.parse_line('{"level":30,"severity":"error","message":"x"}')

        assert result.level == LogLevel.ERROR
        assert result.fields == {"level": 30}

    def test_non_string_message_stays_in_fields(self):
        parser = JSONLineParser()

        result = parser.parse_line('{"message":{"text":"nested"},"msg":"flat"}')

        assert result.message == "flat"
        assert result.fields == {"message": {"text": "nested"}}

    def test_field_types_preserved(self):
        """Test that residual values keep their decoded types."""
        parser = JSONLineParser()
        line = (
            '{"msg":"typed","count":3,"ratio":0.5,"ok":true,"missing":null,'
            '"tags":["a","b"],"ctx":{"user":"u1","retries":2}}'
        )

        result = parser.parse_line(line)

        assert result.fields["count"] == 3
        assert isinstance(result.fields["count"], int)
        assert result.fields["ratio"] == 0.5
        assert result.fields["ok"] is True
        assert result.fields["missing"] is None
        assert result.fields["tags"] == ["a", "b"]
        assert result.fields["ctx"] == {"user": "u1", "retries": 2}

    def test_invalid_json_raises_decode_error(self):
        parser = JSONLineParser()

        with pytest.raises(DecodeError) as exc_info:
            parser.parse_line("{invalid}")

        assert exc_info.value.line == "{invalid}"
        assert "invalid JSON" in str(exc_info.value)

    def test_non_object_json_raises_decode_error(self):
        parser = JSONLineParser()

        with pytest.raises(DecodeError):
            parser.parse_line('["not", "an", "object"]')

    def test_overly_nested_json_raises_decode_error(self):
        parser = JSONLineParser()
        nested = '{"a":' + "[" * 200000 + "]" * 200000 + "}"

        with pytest.raises(DecodeError) as exc_info:
            parser.parse_line(nested)

        assert "nesting too deep" in str(exc_info.value)

    def test_empty_line_raises(self):
        parser = JSONLineParser()

        with pytest.raises(ParsingError):
            parser.parse_line("   ")


class TestLogfmtLineParser:
    """Test logfmt line extraction."""

    def test_standard_logfmt(self):
        """Test the canonical flat example."""
        parser = LogfmtLineParser()

        result = parser.parse_line('level=error msg="Connection timeout" service=worker duration=1.23')

        assert result.level == LogLevel.ERROR
        assert result.message == "Connection timeout"
        assert result.fields == {"service": "worker", "duration": "1.23"}
        assert _is_recent(result.timestamp)

    def test_timestamp_lifted(self):
        parser = LogfmtLineParser()

        result = parser.parse_line("time=2024-01-02T15:04:05Z level=info msg=ok")

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert "time" not in result.fields

    def test_unparseable_timestamp_kept_as_field(self):
        parser = LogfmtLineParser()

        result = parser.parse_line("ts=soon msg=hello")

        assert result.fields == {"ts": "soon"}
        assert _is_recent(result.timestamp)

    def test_message_alias(self):
        parser = LogfmtLineParser()

        result = parser.parse_line('message="hello world" level=dbg')

        assert result.message == "hello world"
        assert result.level == LogLevel.DEBUG

    def test_severity_key_not_lifted(self):
        """Test that logfmt only recognizes the 'level' key."""
        parser = LogfmtLineParser()

        result = parser.parse_line("severity=error msg=x")

        assert result.level == LogLevel.INFO
        assert result.fields == {"severity": "error"}

    def test_fields_are_strings(self):
        parser = LogfmtLineParser()

        result = parser.parse_line("count=3 ok=true")

        assert result.fields == {"count": "3", "ok": "true"}

    def test_free_text_line_never_fails(self):
        parser = LogfmtLineParser()

        result = parser.parse_line("this is not logfmt at all")

        assert result.level == LogLevel.INFO
        assert result.message == ""
        assert result.fields == {}


class TestTextLineParser:
    """Test free-text pattern extraction."""

    def test_bracketed_level(self):
        parser = TextLineParser()

        result = parser.parse_line("[INFO] Starting application")

        assert result.level == LogLevel.INFO
        assert result.message == "Starting application"
        assert _is_recent(result.timestamp)
        assert result.fields == {}

    def test_datetime_bracketed_level(self):
        parser = TextLineParser()

        result = parser.parse_line("2024-01-02 15:04:05 [ERROR] Failed to connect to database")

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, tzinfo=timezone.utc)
        assert result.level == LogLevel.ERROR
        assert result.message == "Failed to connect to database"

    def test_iso8601_with_level(self):
        parser = TextLineParser()

        result = parser.parse_line("2024-01-02T15:04:05.123Z WARN Cache miss ratio high")

        assert result.timestamp == datetime(2024, 1, 2, 15, 4, 5, 123000, tzinfo=timezone.utc)
        assert result.level == LogLevel.WARN
        assert result.message == "Cache miss ratio high"

    def test_iso8601_without_zone_falls_back_to_now(self):
        """Test that the pattern's own format decides the timestamp."""
        parser = TextLineParser()

        result = parser.parse_line("2024-01-02T15:04:05.123 [ERROR] boom")

        assert result.level == LogLevel.ERROR
        assert result.message == "boom"
        assert _is_recent(result.timestamp)

    def test_syslog(self):
        parser = TextLineParser()

        result = parser.parse_line("Jan 02 15:04:05 web-1 sshd[42]: [WARN] Too many attempts")

        assert (result.timestamp.month, result.timestamp.day) == (1, 2)
        assert result.level == LogLevel.WARN
        assert result.message == "Too many attempts"

    def test_unmatched_line_defaults(self):
        parser = TextLineParser()

        result = parser.parse_line("something happened")

        assert result.level == LogLevel.INFO
        assert result.message == "something happened"
        assert _is_recent(result.timestamp)

    def test_unknown_level_word_becomes_info(self):
        parser = TextLineParser()

        result = parser.parse_line("[NOTICE] Config reloaded")

        assert result.level == LogLevel.INFO
        assert result.message == "Config reloaded"

    def test_first_pattern_wins(self):
        """Test that later patterns never override an earlier match."""
        from logparser.data.patterns import DEFAULT_PATTERN_SPECS, PatternSpec, compile_patterns

        catch_all = PatternSpec(name="catch_all", pattern=r"^(.*)$", level_group=None, message_group=1)
        patterns = compile_patterns(DEFAULT_PATTERN_SPECS + (catch_all,))
        line = "[ERROR] Disk failure"

        default = TextLineParser().parse_line(line)
        extended = TextLineParser(patterns).parse_line(line)

        assert extended.level == default.level == LogLevel.ERROR
        assert extended.message == default.message == "Disk failure"


class TestParserRegistry:
    """Test get_parser and batch parsing."""

    def test_get_parser_by_format(self):
        assert isinstance(get_parser(LogFormat.JSON), JSONLineParser)
        assert isinstance(get_parser(LogFormat.LOGFMT), LogfmtLineParser)
        assert isinstance(get_parser(LogFormat.TEXT), TextLineParser)

    def test_get_parser_auto_raises(self):
        with pytest.raises(ConfigurationError):
            get_parser(LogFormat.AUTO)

    def test_error_policy_flags(self):
        assert JSONLineParser.fail_fast is True
        assert LogfmtLineParser.fail_fast is False
        assert TextLineParser.fail_fast is False

    def test_json_batch_fails_fast_with_line_number(self):
        lines = ['{"msg":"ok"}', "{broken", '{"msg":"never reached"}']

        with pytest.raises(DecodeError) as exc_info:
            parse_lines(lines, get_parser(LogFormat.JSON))

        assert exc_info.value.line_number == 2

    def test_best_effort_batch_skips_bad_lines(self):
        """Test that a non-fail-fast parser skips lines it cannot parse."""
        records = parse_lines(["[INFO] one", "   ", "[WARN] two"], get_parser(LogFormat.TEXT))

        assert [r.message for r in records] == ["one", "two"]
