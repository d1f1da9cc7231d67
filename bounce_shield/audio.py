import logging

import numpy as np
import pygame

from .session import GameEvent

logger = logging.getLogger(__name__)

SAMPLE_RATE = 44100

# event -> (frequency, duration, volume, attack, decay, wave)
TONES = {
    GameEvent.PADDLE_HIT: (440, 0.06, 0.25, 0.005, 0.05, "square"),
    GameEvent.POWERUP_COLLECTED: (1200, 0.15, 0.3, 0.01, 0.14, "sine"),
    GameEvent.HEART_AWARDED: (880, 0.2, 0.3, 0.01, 0.18, "triangle"),
    GameEvent.GAME_START: (660, 0.25, 0.3, 0.02, 0.2, "sine"),
    GameEvent.GAME_OVER: (150, 0.5, 0.4, 0.02, 0.45, "saw"),
}


def make_waveform(frequency, duration, volume, attack, decay, wave="sine"):
    """Return a stereo int16 sample array for a single enveloped tone."""
    n_samples = int(SAMPLE_RATE * duration)
    t = np.linspace(0, duration, n_samples, dtype=np.float32)

    if wave == "square":
        waveform = np.sign(np.sin(2 * np.pi * frequency * t))
    elif wave == "saw":
        waveform = 2 * (t * frequency % 1) - 1
    elif wave == "triangle":
        waveform = 2 * np.abs(2 * (t * frequency % 1) - 1) - 1
    else:
        waveform = np.sin(2 * np.pi * frequency * t)

    envelope = np.ones(n_samples, dtype=np.float32)
    attack_samples = min(int(attack * SAMPLE_RATE), n_samples)
    decay_samples = min(int(decay * SAMPLE_RATE), n_samples)
    if attack_samples > 0:
        envelope[:attack_samples] = np.linspace(0, 1, attack_samples)
    if decay_samples > 0:
        envelope[-decay_samples:] = np.linspace(1, 0, decay_samples)

    audio = (waveform * envelope * volume * 32767).astype(np.int16)
    return np.column_stack((audio, audio))


class SoundManager:
    """Plays a synthesized cue per ``GameEvent``; silent if no audio device."""

    def __init__(self, enabled=True):
        self.sounds = {}
        self.enabled = False
        if not enabled:
            return
        try:
            pygame.mixer.init(frequency=SAMPLE_RATE, size=-16, channels=2, buffer=512)
            for event, params in TONES.items():
                self.sounds[event] = pygame.sndarray.make_sound(make_waveform(*params))
            self.enabled = True
        except (pygame.error, ValueError) as e:
            logger.warning("Audio unavailable, continuing without sound: %s", e)
            self.sounds.clear()

    def play(self, event):
        if not self.enabled or event not in self.sounds:
            return
        try:
            self.sounds[event].play()
        except pygame.error as e:
            logger.warning("Could not play %s cue: %s", event.value, e)

    def handle(self, events):
        for event in events:
            self.play(event)
