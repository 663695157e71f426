# core/utils/announcer.py
import logging

from django.conf import settings

logger = logging.getLogger(__name__)


def _clamp(value, low, high):
    return max(low, min(high, float(value)))


class AnnouncerConfig:
    """Volume 0.0-1.0, speech rate 0.1-10.0, pitch 0.0-2.0."""

    def __init__(self, volume=0.8, rate=0.9, pitch=1.0, enabled=True):
        self.volume = _clamp(volume, 0.0, 1.0)
        self.rate = _clamp(rate, 0.1, 10.0)
        self.pitch = _clamp(pitch, 0.0, 2.0)
        self.enabled = enabled

    @classmethod
    def from_settings(cls):
        conf = getattr(settings, 'QUEUE_ANNOUNCER', {})
        return cls(
            volume=conf.get('VOLUME', 0.8),
            rate=conf.get('RATE', 0.9),
            pitch=conf.get('PITCH', 1.0),
            enabled=conf.get('ENABLED', True),
        )

    def as_dict(self):
        return {
            'enabled': self.enabled,
            'volume': self.volume,
            'rate': self.rate,
            'pitch': self.pitch,
        }


class Announcer:
    """
    Queue call-out channel (display chime, text-to-speech, ...).

    Implementations receive their configuration at construction; nothing is
    process-wide.
    """

    def __init__(self, config=None):
        self.config = config or AnnouncerConfig()

    def play_tone(self, kind):
        raise NotImplementedError

    def speak(self, text):
        raise NotImplementedError

    def announce(self, text, tone='call'):
        if not self.config.enabled:
            return
        self.play_tone(tone)
        self.speak(text)


class LoggingAnnouncer(Announcer):
    """Default announcer: records call-outs in the application log."""

    def play_tone(self, kind):
        logger.info(f"Tone '{kind}' (volume {self.config.volume:.2f})")

    def speak(self, text):
        logger.info(
            f"Announcement: {text} "
            f"(rate {self.config.rate:.2f}, pitch {self.config.pitch:.2f})"
        )


class RecordingAnnouncer(Announcer):
    """Keeps every call-out in memory; used by display boards and tests."""

    def __init__(self, config=None):
        super().__init__(config)
        self.tones = []
        self.messages = []

    def play_tone(self, kind):
        self.tones.append(kind)

    def speak(self, text):
        self.messages.append(text)


def default_announcer():
    return LoggingAnnouncer(AnnouncerConfig.from_settings())
