"""Queue call-out announcer."""
import logging

from core.utils.announcer import (
    AnnouncerConfig,
    LoggingAnnouncer,
    RecordingAnnouncer,
    default_announcer,
)


def test_config_is_clamped():
    config = AnnouncerConfig(volume=3, rate=0, pitch=-1)

    assert config.volume == 1.0
    assert config.rate == 0.1
    assert config.pitch == 0.0


def test_config_defaults():
    assert AnnouncerConfig().as_dict() == {
        "enabled": True,
        "volume": 0.8,
        "rate": 0.9,
        "pitch": 1.0,
    }


def test_config_from_settings(settings):
    settings.QUEUE_ANNOUNCER = {"VOLUME": 0.5, "RATE": 20, "ENABLED": False}

    config = AnnouncerConfig.from_settings()

    assert config.volume == 0.5
    assert config.rate == 10.0
    assert config.pitch == 1.0
    assert config.enabled is False


def test_announce_plays_tone_then_speaks():
    announcer = RecordingAnnouncer()

    announcer.announce("Ticket 4, please go to Desk 2")

    assert announcer.tones == ["call"]
    assert announcer.messages == ["Ticket 4, please go to Desk 2"]


def test_disabled_announcer_is_silent():
    announcer = RecordingAnnouncer(AnnouncerConfig(enabled=False))

    announcer.announce("Ticket 1, please go to Desk 1")

    assert announcer.tones == []
    assert announcer.messages == []


def test_logging_announcer(caplog):
    announcer = LoggingAnnouncer(AnnouncerConfig(volume=0.25))

    with caplog.at_level(logging.INFO, logger="core.utils.announcer"):
        announcer.announce("Ticket 9, please go to Lab", tone="recall")

    assert "Tone 'recall' (volume 0.25)" in caplog.text
    assert "Announcement: Ticket 9, please go to Lab" in caplog.text


def test_default_announcer_follows_settings(settings):
    settings.QUEUE_ANNOUNCER = {"VOLUME": 0.3}

    announcer = default_announcer()

    assert isinstance(announcer, LoggingAnnouncer)
    assert announcer.config.volume == 0.3
