"""Tests for heart display backends (terminal, log, registry)."""

import io
import logging
from unittest.mock import MagicMock

import pytest

from heartpace.display import get_display
from heartpace.display.log import LogDisplay
from heartpace.display.terminal import TerminalDisplay
from heartpace.pulse.enums import HeartGlyph


@pytest.fixture
def mock_config():
    config = MagicMock()
    config.display = "terminal"
    return config


class TestHeartGlyph:
    def test_for_state(self):
        assert HeartGlyph.for_state(True) is HeartGlyph.FILLED
        assert HeartGlyph.for_state(False) is HeartGlyph.OUTLINE

    def test_values_and_symbols(self):
        assert str(HeartGlyph.FILLED) == "heart.fill"
        assert str(HeartGlyph.OUTLINE) == "heart"
        assert HeartGlyph.FILLED.symbol == "♥"
        assert HeartGlyph.OUTLINE.symbol == "♡"


class TestTerminalDisplay:
    def test_redraws_single_line(self):
        stream = io.StringIO()
        display = TerminalDisplay(stream=stream)

        display.pulse_toggled(True)
        display.pulse_toggled(False)

        assert stream.getvalue() == "\r♥\r♡"

    def test_includes_bpm_when_source_given(self):
        stream = io.StringIO()
        display = TerminalDisplay(stream=stream, bpm_source=lambda: 97.5)

        display.pulse_toggled(True)

        assert stream.getvalue() == "\r♥   97.5 BPM"

    def test_close_ends_line_once(self):
        stream = io.StringIO()
        display = TerminalDisplay(stream=stream)
        display.pulse_toggled(True)

        display.close()
        display.close()

        assert stream.getvalue() == "\r♥\n"

    def test_close_without_output_writes_nothing(self):
        stream = io.StringIO()
        TerminalDisplay(stream=stream).close()
        assert stream.getvalue() == ""

    def test_write_failure_never_raises(self, caplog):
        stream = MagicMock()
        stream.write.side_effect = BrokenPipeError("pipe closed")
        display = TerminalDisplay(stream=stream)

        with caplog.at_level(logging.WARNING, logger="heartpace.display.terminal"):
            display.pulse_toggled(True)

        assert "pipe closed" in caplog.text


class TestLogDisplay:
    def test_logs_glyph_at_debug(self, caplog):
        with caplog.at_level(logging.DEBUG, logger="heartpace.display.log"):
            LogDisplay().pulse_toggled(False)

        assert "Pulse: heart" in caplog.text


class TestRegistry:
    def test_get_terminal(self, mock_config):
        display = get_display("terminal", config=mock_config)
        assert isinstance(display, TerminalDisplay)

    def test_get_log(self, mock_config):
        assert isinstance(get_display("log", config=mock_config), LogDisplay)

    def test_name_from_config(self, mock_config):
        mock_config.display = "log"
        assert isinstance(get_display(config=mock_config), LogDisplay)

    def test_name_is_case_insensitive(self, mock_config):
        assert isinstance(get_display(" Terminal ", config=mock_config), TerminalDisplay)

    def test_bpm_source_passed_through(self, mock_config):
        source = lambda: 120.0  # noqa: E731
        display = get_display("terminal", config=mock_config, bpm_source=source)
        assert display.bpm_source is source

    def test_unknown_falls_back_to_log(self, mock_config, caplog):
        with caplog.at_level(logging.WARNING, logger="heartpace.display"):
            display = get_display("menubar", config=mock_config)

        assert isinstance(display, LogDisplay)
        assert "Unknown display backend: menubar" in caplog.text
