import logging

import pytest

from ace.channels.push import ConsolePushSink, RecordingSink, select_display_sink
from ace.core.config import AppConfig
from ace.notifications.models import DisplayAction
from tests.helpers import make_session


class TestConsolePushSink:
    """Test console delivery output."""

    def test_show_and_clear(self, caplog):
        session = make_session(device_token="device-1")
        with caplog.at_level(logging.INFO, logger="ace.channels.push"):
            ConsolePushSink().deliver(session, [DisplayAction.clear(), DisplayAction.show("Prep: Sync", "Starts in 30 min.")])

        messages = [r.getMessage() for r in caplog.records if r.name == "ace.channels.push"]
        assert messages == [
            "[PUSH] [SILENT CLEAR] Sending request to clear lock screen",
            "[PUSH] [VISIBLE] Title: 'Prep: Sync' Body: 'Starts in 30 min.'",
        ]


class TestRecordingSink:
    def test_records_per_user(self):
        sink = RecordingSink()
        actions = [DisplayAction.clear(), DisplayAction.show("Hurry! Sync", "Starts in 1 min.")]

        sink.deliver(make_session("a@x.com"), actions)
        sink.deliver(make_session("b@x.com"), [DisplayAction.clear()])

        assert sink.delivered["a@x.com"] == actions
        assert sink.delivered["b@x.com"] == [DisplayAction.clear()]


class TestSelectDisplaySink:
    def test_console(self):
        assert isinstance(select_display_sink(AppConfig()), ConsolePushSink)

    def test_memory(self):
        assert isinstance(select_display_sink(AppConfig(push_driver="memory")), RecordingSink)

    def test_unknown(self):
        with pytest.raises(ValueError, match="Unsupported PUSH_DRIVER"):
            select_display_sink(AppConfig(push_driver="apns"))
