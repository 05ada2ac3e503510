# pyglet host for the CHIP-8 core.
# We subclass pyglet.window.Window (it handles graphics, sound output, and keyboard
# handling) and override whatever def we need from there. The core never sees
# pyglet: it gets a 16-key vector, and hands back a framebuffer and a sound flag.

import logging
import random

import pyglet
from pyglet.media import synthesis

from .clock import Clock
from .constants import HEIGHT, KEY_COUNT, WIDTH
from .errors import Chip8Error

logger = logging.getLogger(__name__)

# Key mapping - maps physical keyboard keys to the CHIP-8 keypad
#   1 2 3 4        1 2 3 C
#   Q W E R   ->   4 5 6 D
#   A S D F        7 8 9 E
#   Z X C V        A 0 B F
KEYMAP = {
    pyglet.window.key._1: 0x1, pyglet.window.key._2: 0x2, pyglet.window.key._3: 0x3, pyglet.window.key._4: 0xC,
    pyglet.window.key.Q: 0x4, pyglet.window.key.W: 0x5, pyglet.window.key.E: 0x6, pyglet.window.key.R: 0xD,
    pyglet.window.key.A: 0x7, pyglet.window.key.S: 0x8, pyglet.window.key.D: 0x9, pyglet.window.key.F: 0xE,
    pyglet.window.key.Z: 0xA, pyglet.window.key.X: 0x0, pyglet.window.key.C: 0xB, pyglet.window.key.V: 0xF,
}

CAPTION = "CHIP-8 Emulator"


class Chip8Window(pyglet.window.Window):
    def __init__(self, machine, config, rom_path=None):
        self.scale = config.scale
        self.frame = bytes(WIDTH * HEIGHT)
        super().__init__(WIDTH * self.scale, HEIGHT * self.scale, caption=CAPTION, resizable=False)

        self.machine = machine
        self.config = config
        self.rom_path = rom_path
        self.clock = Clock(machine, cpu_hz=config.cpu_hz, timer_hz=config.timer_hz)
        self.keys = [False] * KEY_COUNT

        # ---- Performance Counters ----
        self.cycles_per_second = 0
        self._last_cycles = 0
        self.cps_label = pyglet.text.Label(
            "Cycles/s: 0",
            font_size=12,
            x=5,
            y=self.height - 15,
            anchor_x='left',
            anchor_y='center',
            color=(255, 0, 0, 255)
        )
        pyglet.clock.schedule_interval(self._update_cps, 1.0)

        # CPU and timers both run off the elapsed time handed to _update
        pyglet.clock.schedule_interval(self._update, 1.0 / config.cpu_hz)

        # Pre-create a pixel sprite for drawing
        self.pixel = pyglet.image.SolidColorImagePattern((255, 255, 255, 255)).create_image(self.scale, self.scale)

        self.sound_playing = False  # Track if beep is currently playing

    # ---- Sound ----
    def _play_beep(self, duration=0.2, pitch_variation=15):
        freq = self.config.beep_frequency + random.randint(-pitch_variation, pitch_variation)
        wave = synthesis.Sine(duration=duration, frequency=freq)

        player = pyglet.media.Player()
        player.queue(wave)
        player.play()
        self.sound_playing = True

        # Ensure the sound stops after the requested duration
        def on_eos():
            self.sound_playing = False
            player.delete()

        player.on_eos = on_eos

    def _update_cps(self, dt):
        self.cycles_per_second = self.clock.cycles - self._last_cycles
        self._last_cycles = self.clock.cycles
        self.cps_label.text = f"Cycles/s: {self.cycles_per_second}"

    # ---- CPU + timers ----
    def _update(self, dt):
        self.machine.set_keys(self.keys)
        was_halted = self.clock.halted
        fault = self.clock.advance(dt)
        if fault is not None and not was_halted:
            # freeze the display, leave the window up so the user can reload
            self.set_caption("%s - halted: %s" % (CAPTION, fault))

        if self.machine.sound_active and not self.sound_playing:
            self._play_beep()

        dirty, frame = self.machine.take_frame()
        if dirty:
            self.frame = frame

    def reload(self):
        try:
            if self.rom_path:
                self.machine.load_rom_file(self.rom_path)
            else:
                self.machine.reset()
        except (OSError, Chip8Error) as e:
            logger.error("Reload failed: %s", e)
            return
        self.clock.reset()
        self._last_cycles = 0
        self.set_caption(CAPTION)

    # ---- Input ----
    def on_key_press(self, symbol, modifiers):
        #@Override
        if symbol == pyglet.window.key.ESCAPE:
            self.close()
        elif symbol == pyglet.window.key.F1:
            self.reload()
        elif symbol == pyglet.window.key.F2:
            root = logging.getLogger("chip8")
            root.setLevel(logging.INFO if root.getEffectiveLevel() <= logging.DEBUG else logging.DEBUG)
            logger.info("Debug logging %s", "on" if root.isEnabledFor(logging.DEBUG) else "off")
        elif symbol in KEYMAP:
            self.keys[KEYMAP[symbol]] = True

    def on_key_release(self, symbol, modifiers):
        #@Override
        if symbol in KEYMAP:
            self.keys[KEYMAP[symbol]] = False

    # ---- Drawing ----
    def on_draw(self):
        #@Override
        self.clear()
        for i, on in enumerate(self.frame):
            if on:
                x = (i % WIDTH) * self.scale
                y = (HEIGHT - 1 - (i // WIDTH)) * self.scale
                self.pixel.blit(x, y)
        self.cps_label.draw()

    def on_close(self):
        #@Override
        pyglet.clock.unschedule(self._update)
        pyglet.clock.unschedule(self._update_cps)
        super().on_close()


def run(machine, config, rom_path=None):
    Chip8Window(machine, config, rom_path)
    pyglet.app.run()
