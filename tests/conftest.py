import os
import random

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")

import pytest

import waveinvader


class RecordingContext:
    """Stands in for CanvasContext and remembers every draw call."""
    def __init__(self):
        self.calls = []
        self.fill_style = "white"
        self.stroke_style = "white"
        self.line_width = 5
        self.font = waveinvader.FONT_HUD
        self.text_align = "left"
        self.shadow_color = None
        self.shadow_offset_x = 0
        self.shadow_offset_y = 0
        self.depth = 0

    def save(self):
        self.depth += 1

    def restore(self):
        self.depth -= 1

    def fill_rect(self, x, y, w, h):
        self.calls.append(("fill_rect", x, y, w, h))

    def stroke_rect(self, x, y, w, h):
        self.calls.append(("stroke_rect", x, y, w, h))

    def fill_text(self, text, x, y):
        self.calls.append(("fill_text", text, x, y, self.font, self.text_align))

    def texts(self):
        return [c[1] for c in self.calls if c[0] == "fill_text"]


class FixedRandom:
    def __init__(self, value):
        self.value = value

    def random(self):
        return self.value


@pytest.fixture
def ctx():
    return RecordingContext()


@pytest.fixture
def game():
    return waveinvader.Game(500, 700, rng=random.Random(1234))


@pytest.fixture
def fixed_random():
    return FixedRandom
