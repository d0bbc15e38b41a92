"""
Wave Invader — single-file pygame game.
File: waveinvader.py

How to run:
  pip install pygame
  python waveinvader.py

A player ship slides along the bottom and fires upward at a grid of enemies.
The grid marches sideways, bounces off the edges and drops one row per bounce.
Clearing a wave spawns a bigger one and grants a bonus life. The game ends
when an enemy reaches the bottom or the last life is lost; press R to restart.

The simulation draws through a small canvas-style context (fill_rect,
stroke_rect, fill_text, save/restore) so it can run without a window.
"""
from __future__ import annotations
import argparse
import logging
import re
import random
import sys
from typing import List, Optional, Set, Tuple

import pygame

logger = logging.getLogger(__name__)

# ============================
# SETTINGS & CONSTANTS
# ============================
WIDTH, HEIGHT = 500, 700
FPS = 60
TITLE = "Wave Invader"

# Colors
COLOR_BG = (13, 16, 33)          # #0d1021
COLOR_UI = "white"
COLOR_SHADOW = "black"

# Fonts (canvas-style "<size>px <family>")
FONT_HUD = "30px Impact"
FONT_GAME_OVER = "100px Impact"
FONT_HINT = "20px Impact"
LINE_WIDTH = 5

# Gameplay constants
PLAYER_SIZE = (100, 100)
PLAYER_SPEED = 5
PLAYER_LIVES = 3

PROJECTILE_SIZE = (8, 40)
PROJECTILE_SPEED = 20
PROJECTILE_POOL_SIZE = 10

ENEMY_SIZE = 60

WAVE_START_COLUMNS = 2
WAVE_START_ROWS = 2
WAVE_SPEED_X = 2
WAVE_ENTRY_STEP = 5              # px/tick while sliding in from above
WAVE_COLUMN_CHANCE = 0.5
WAVE_MAX_WIDTH_RATIO = 0.8
WAVE_MAX_HEIGHT_RATIO = 0.6

# HUD layout
HUD_PAD_X = 20
HUD_SCORE_Y = 40
HUD_WAVE_Y = 80
HUD_LIFE_Y = 100
HUD_LIFE_SIZE = (5, 20)
HUD_LIFE_SPACING = 10
HUD_SHADOW_OFFSET = 2

# Actions
ACTION_LEFT = "LEFT"
ACTION_RIGHT = "RIGHT"
ACTION_FIRE = "FIRE"
ACTION_RESTART = "RESTART"

KEY_BINDINGS = {
    pygame.K_LEFT: ACTION_LEFT,
    pygame.K_a: ACTION_LEFT,
    pygame.K_RIGHT: ACTION_RIGHT,
    pygame.K_d: ACTION_RIGHT,
    pygame.K_1: ACTION_FIRE,
    pygame.K_SPACE: ACTION_FIRE,
    pygame.K_r: ACTION_RESTART,
}


# ============================
# UTILS
# ============================
def clamp(x: float, lo: float, hi: float) -> float:
    return lo if x < lo else hi if x > hi else x


def check_collision(a, b) -> bool:
    """Strict AABB overlap: boxes that only touch do not collide."""
    return (
        a.x < b.x + b.width
        and a.x + a.width > b.x
        and a.y < b.y + b.height
        and a.y + a.height > b.y
    )


_FONT_RE = re.compile(r"^\s*(\d+)px\s+(.+?)\s*$")


def parse_font(spec: str) -> Tuple[int, str]:
    match = _FONT_RE.match(spec)
    if match is None:
        raise ValueError(f"unsupported font spec: {spec!r}")
    return int(match.group(1)), match.group(2).lower()


def _to_rect(x: float, y: float, w: float, h: float) -> pygame.Rect:
    return pygame.Rect(round(x), round(y), round(w), round(h))


# ============================
# DRAWING
# ============================
class CanvasContext:
    """Canvas-2D style drawing on top of a pygame Surface.

    Style attributes mirror the canvas API (fill_style, stroke_style,
    line_width, font, text_align, shadow_*) and can be pushed/popped with
    save() and restore(). Text is positioned by its baseline.
    """
    STYLE_FIELDS = (
        "fill_style", "stroke_style", "line_width", "font", "text_align",
        "shadow_color", "shadow_offset_x", "shadow_offset_y",
    )

    def __init__(self, surface: pygame.Surface):
        self.surface = surface
        self.fill_style = COLOR_UI
        self.stroke_style = COLOR_UI
        self.line_width = LINE_WIDTH
        self.font = FONT_HUD
        self.text_align = "left"
        self.shadow_color = None
        self.shadow_offset_x = 0
        self.shadow_offset_y = 0
        self._stack: List[dict] = []
        self._fonts = {}

    def save(self):
        self._stack.append({name: getattr(self, name) for name in self.STYLE_FIELDS})

    def restore(self):
        if not self._stack:
            return
        for name, value in self._stack.pop().items():
            setattr(self, name, value)

    def clear_rect(self, x: float, y: float, w: float, h: float):
        self.surface.fill(COLOR_BG, _to_rect(x, y, w, h))

    def fill_rect(self, x: float, y: float, w: float, h: float):
        pygame.draw.rect(self.surface, pygame.Color(self.fill_style), _to_rect(x, y, w, h))

    def stroke_rect(self, x: float, y: float, w: float, h: float):
        # Canvas strokes straddle the edge, pygame draws inside the rect
        lw = max(1, int(self.line_width))
        rect = _to_rect(x, y, w, h).inflate(lw, lw)
        pygame.draw.rect(self.surface, pygame.Color(self.stroke_style), rect, lw)

    def fill_text(self, text: str, x: float, y: float):
        font = self._get_font(self.font)
        if self.shadow_color is not None and (self.shadow_offset_x or self.shadow_offset_y):
            self._blit_text(font, text, self.shadow_color,
                            x + self.shadow_offset_x, y + self.shadow_offset_y)
        self._blit_text(font, text, self.fill_style, x, y)

    def _blit_text(self, font: pygame.font.Font, text: str, color, x: float, y: float):
        img = font.render(text, True, pygame.Color(color))
        if self.text_align == "center":
            x -= img.get_width() / 2
        elif self.text_align in ("right", "end"):
            x -= img.get_width()
        self.surface.blit(img, (round(x), round(y - font.get_ascent())))

    def _get_font(self, spec: str) -> pygame.font.Font:
        font = self._fonts.get(spec)
        if font is None:
            if not pygame.font.get_init():
                pygame.font.init()
            size, family = parse_font(spec)
            font = pygame.font.SysFont(family, size)
            self._fonts[spec] = font
        return font


# ============================
# INPUT
# ============================
class KeyTracker:
    """Held actions plus one-shot fire/restart edges, read once per frame."""
    def __init__(self):
        self.held: Set[str] = set()
        self._fire_latched = False
        self._fire_pending = False
        self._restart_pending = False

    def press(self, action: str):
        self.held.add(action)
        if action == ACTION_FIRE and not self._fire_latched:
            self._fire_latched = True
            self._fire_pending = True
        if action == ACTION_RESTART:
            self._restart_pending = True

    def release(self, action: str):
        self.held.discard(action)
        if action == ACTION_FIRE:
            self._fire_latched = False

    def is_held(self, action: str) -> bool:
        return action in self.held

    def consume_fire(self) -> bool:
        pending = self._fire_pending
        self._fire_pending = False
        return pending

    def consume_restart(self) -> bool:
        pending = self._restart_pending
        self._restart_pending = False
        return pending


# ============================
# ENTITIES
# ============================
class Projectile:
    def __init__(self):
        self.width, self.height = PROJECTILE_SIZE
        self.x = 0.0
        self.y = 0.0
        self.speed = PROJECTILE_SPEED
        self.free = True

    def start(self, x: float, y: float):
        # x is the horizontal centre of the shooter
        self.x = x - self.width * 0.5
        self.y = y
        self.free = False

    def reset(self):
        self.free = True

    def update(self):
        if self.free:
            return
        self.y -= self.speed
        if self.y < -self.height:
            self.reset()

    def draw(self, ctx):
        if not self.free:
            ctx.fill_rect(self.x, self.y, self.width, self.height)


class Player:
    def __init__(self, game: Game):
        self.game = game
        self.width, self.height = PLAYER_SIZE
        self.speed = PLAYER_SPEED
        self.lives = PLAYER_LIVES
        self.x = 0.0
        self.y = 0.0
        self.reset_position()

    def reset_position(self):
        self.x = self.game.width * 0.5 - self.width * 0.5
        self.y = self.game.height - self.height

    def update(self):
        keys = self.game.keys
        if keys.is_held(ACTION_LEFT):
            self.x -= self.speed
        if keys.is_held(ACTION_RIGHT):
            self.x += self.speed
        # Half the ship may hang off either edge
        self.x = clamp(self.x, -self.width * 0.5, self.game.width - self.width * 0.5)

    def shoot(self):
        projectile = self.game.get_projectile()
        if projectile is None:
            logger.debug("Shot ignored, all %d projectiles in flight", len(self.game.projectile_pool))
            return
        projectile.start(self.x + self.width * 0.5, self.y)

    def restart(self):
        self.reset_position()
        self.lives = PLAYER_LIVES

    def draw(self, ctx):
        ctx.fill_rect(self.x, self.y, self.width, self.height)


class Enemy:
    def __init__(self, game: Game, position_x: float, position_y: float):
        self.game = game
        self.width = game.enemy_size
        self.height = game.enemy_size
        self.x = 0.0
        self.y = 0.0
        # Offset inside the wave grid
        self.position_x = position_x
        self.position_y = position_y
        self.marked_for_deletion = False

    def update(self, wave_x: float, wave_y: float):
        game = self.game
        self.x = wave_x + self.position_x
        self.y = wave_y + self.position_y

        # Projectiles
        for projectile in game.projectile_pool:
            if not projectile.free and game.check_collision(self, projectile):
                self.marked_for_deletion = True
                projectile.reset()
                if not game.game_over:
                    game.score += 1

        # Player ram
        player = game.player
        if game.check_collision(self, player):
            self.marked_for_deletion = True
            if not game.game_over and game.score > 0:
                game.score -= 1
            player.lives -= 1
            if player.lives < 1:
                game.end_game("out of lives")

        # Bottom of the playfield
        if self.y + self.height > game.height:
            game.end_game("enemy reached the bottom")
            self.marked_for_deletion = True

    def draw(self, ctx):
        ctx.stroke_rect(self.x, self.y, self.width, self.height)


class Wave:
    def __init__(self, game: Game):
        self.game = game
        self.columns = game.columns
        self.rows = game.rows
        self.width = self.columns * game.enemy_size
        self.height = self.rows * game.enemy_size
        # Starts fully above the screen and slides in
        self.x = 0.0
        self.y = float(-self.height)
        self.speed_x = WAVE_SPEED_X
        self.speed_y = 0
        self.enemies: List[Enemy] = []
        self.trigger_next_wave = False
        self.create()

    def create(self):
        size = self.game.enemy_size
        for row in range(self.rows):
            for col in range(self.columns):
                self.enemies.append(Enemy(self.game, col * size, row * size))

    def render(self, ctx):
        self.speed_y = 0
        if self.y < 0:
            self.y += WAVE_ENTRY_STEP

        # Bounce off either side and drop one row
        if self.x < 0 or self.x + self.width > self.game.width:
            self.speed_x *= -1
            self.speed_y = self.game.enemy_size
        self.x += self.speed_x
        self.y += self.speed_y

        for enemy in self.enemies:
            enemy.update(self.x, self.y)
            enemy.draw(ctx)
        self.enemies = [e for e in self.enemies if not e.marked_for_deletion]


# ============================
# GAME
# ============================
class Game:
    def __init__(self, width: int = WIDTH, height: int = HEIGHT, rng: Optional[random.Random] = None):
        self.width = width
        self.height = height
        self.rng = rng if rng is not None else random.Random()
        self.keys = KeyTracker()
        self.player = Player(self)

        self.projectile_pool: List[Projectile] = []
        self.number_of_projectiles = PROJECTILE_POOL_SIZE
        self.create_projectiles()

        self.columns = WAVE_START_COLUMNS
        self.rows = WAVE_START_ROWS
        self.enemy_size = ENEMY_SIZE

        self.waves: List[Wave] = [Wave(self)]
        self.wave_count = 1

        self.score = 0
        self.game_over = False
        logger.info("New game on a %dx%d playfield", width, height)

    # ============================
    # INPUT
    # ============================
    def key_down(self, action: str):
        self.keys.press(action)

    def key_up(self, action: str):
        self.keys.release(action)

    def handle_input(self):
        if self.keys.consume_fire():
            self.player.shoot()
        # Restart presses outside of game over are dropped
        if self.keys.consume_restart() and self.game_over:
            self.restart()

    # ============================
    # FRAME
    # ============================
    def render(self, ctx):
        """Advance the simulation one tick and draw it."""
        self.handle_input()
        self.draw_status_text(ctx)
        self.player.draw(ctx)
        self.player.update()
        for projectile in self.projectile_pool:
            projectile.draw(ctx)
            projectile.update()
        # Waves spawned during this pass start moving next frame
        for wave in list(self.waves):
            wave.render(ctx)
            if not wave.enemies and not wave.trigger_next_wave and not self.game_over:
                self.new_wave()
                self.wave_count += 1
                wave.trigger_next_wave = True
                self.player.lives += 1

    # ============================
    # POOL & COLLISIONS
    # ============================
    def create_projectiles(self):
        for _ in range(self.number_of_projectiles):
            self.projectile_pool.append(Projectile())

    def get_projectile(self) -> Optional[Projectile]:
        for projectile in self.projectile_pool:
            if projectile.free:
                return projectile
        return None

    @staticmethod
    def check_collision(a, b) -> bool:
        return check_collision(a, b)

    # ============================
    # STATE
    # ============================
    def new_wave(self):
        if (self.rng.random() < WAVE_COLUMN_CHANCE
                and self.columns * self.enemy_size < self.width * WAVE_MAX_WIDTH_RATIO):
            self.columns += 1
        elif self.rows * self.enemy_size < self.height * WAVE_MAX_HEIGHT_RATIO:
            self.rows += 1
        self.waves.append(Wave(self))
        logger.info("Wave %d incoming: %dx%d", self.wave_count + 1, self.columns, self.rows)

    def end_game(self, reason: str):
        if self.game_over:
            return
        self.game_over = True
        logger.info("Game over (%s) at wave %d, score %d", reason, self.wave_count, self.score)

    def restart(self):
        self.player.restart()
        self.columns = WAVE_START_COLUMNS
        self.rows = WAVE_START_ROWS
        self.waves = [Wave(self)]
        self.wave_count = 1
        self.score = 0
        self.game_over = False
        logger.info("Game restarted")

    # ============================
    # RENDERING
    # ============================
    def draw_status_text(self, ctx):
        ctx.save()
        ctx.shadow_offset_x = HUD_SHADOW_OFFSET
        ctx.shadow_offset_y = HUD_SHADOW_OFFSET
        ctx.shadow_color = COLOR_SHADOW
        ctx.fill_text(f"Score: {self.score}", HUD_PAD_X, HUD_SCORE_Y)
        ctx.fill_text(f"Wave: {self.wave_count}", HUD_PAD_X, HUD_WAVE_Y)
        pip_w, pip_h = HUD_LIFE_SIZE
        for i in range(self.player.lives):
            ctx.fill_rect(HUD_PAD_X + HUD_LIFE_SPACING * i, HUD_LIFE_Y, pip_w, pip_h)
        if self.game_over:
            ctx.text_align = "center"
            ctx.font = FONT_GAME_OVER
            ctx.fill_text("Game over!!", self.width * 0.5, self.height * 0.5)
            ctx.font = FONT_HINT
            ctx.fill_text("Press R to restart!", self.width * 0.5, self.height * 0.5 + 30)
        ctx.restore()


# ============================
# HOST
# ============================
def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid int value: {value!r}")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def parse_args(argv: Optional[List[str]] = None) -> argparse.Namespace:
    p = argparse.ArgumentParser(prog="waveinvader", description=TITLE)
    p.add_argument("--width", type=positive_int, default=WIDTH, help="Playfield width in pixels")
    p.add_argument("--height", type=positive_int, default=HEIGHT, help="Playfield height in pixels")
    p.add_argument("--fps", type=positive_int, default=FPS, help="Frames per second")
    p.add_argument("--log-level", default="INFO",
                   choices=["DEBUG", "INFO", "WARNING", "ERROR"], help="Logging verbosity")
    return p.parse_args(argv)


def run(width: int = WIDTH, height: int = HEIGHT, fps: int = FPS):
    pygame.init()
    pygame.display.set_caption(TITLE)
    screen = pygame.display.set_mode((width, height))
    clock = pygame.time.Clock()
    ctx = CanvasContext(screen)
    game = Game(width, height)

    running = True
    while running:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                running = False
            elif event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    running = False
                elif event.key in KEY_BINDINGS:
                    game.key_down(KEY_BINDINGS[event.key])
            elif event.type == pygame.KEYUP and event.key in KEY_BINDINGS:
                game.key_up(KEY_BINDINGS[event.key])

        ctx.clear_rect(0, 0, width, height)
        game.render(ctx)
        pygame.display.flip()
        clock.tick(fps)
    pygame.quit()


def main(argv: Optional[List[str]] = None):
    args = parse_args(argv)
    logging.basicConfig(level=args.log_level,
                        format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    run(args.width, args.height, args.fps)


if __name__ == "__main__":
    main(sys.argv[1:])
