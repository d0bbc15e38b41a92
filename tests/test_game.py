import random

import pytest

import waveinvader
from waveinvader import Game


def test_initial_state(game):
    assert len(game.projectile_pool) == waveinvader.PROJECTILE_POOL_SIZE
    assert all(p.free for p in game.projectile_pool)
    assert (game.columns, game.rows) == (2, 2)
    assert len(game.waves) == 1
    assert game.wave_count == 1
    assert game.score == 0
    assert not game.game_over


def test_render_order_hud_player_projectiles_waves(game, ctx):
    game.player.shoot()
    game.render(ctx)
    kinds = [c[0] for c in ctx.calls]
    assert kinds[:2] == ["fill_text", "fill_text"]
    # 3 life pips, then the player, then the one active projectile
    assert kinds[2:7] == ["fill_rect"] * 5
    assert ctx.calls[5] == ("fill_rect", 200, 600, 100, 100)
    assert kinds[7:] == ["stroke_rect"] * 4
    assert ctx.depth == 0


def test_cleared_wave_spawns_next(game, ctx):
    first = game.waves[0]
    first.enemies = []
    game.render(ctx)
    assert len(game.waves) == 2
    assert game.wave_count == 2
    assert first.trigger_next_wave
    assert game.player.lives == 4
    # The new wave is not moved until the next frame
    second = game.waves[1]
    assert second.y == -second.height


def test_cleared_wave_triggers_only_once(game, ctx):
    game.waves[0].enemies = []
    game.render(ctx)
    game.render(ctx)
    assert len(game.waves) == 2
    assert game.wave_count == 2
    assert game.player.lives == 4


def test_no_spawn_after_game_over(game, ctx):
    game.waves[0].enemies = []
    game.end_game("test")
    game.render(ctx)
    assert len(game.waves) == 1
    assert game.wave_count == 1
    assert not game.waves[0].trigger_next_wave


@pytest.mark.parametrize("roll, columns, rows, expected", [
    (0.1, 2, 2, (3, 2)),
    (0.9, 2, 2, (2, 3)),
    (0.1, 6, 2, (7, 2)),
    # 7 columns are 420px, not under 80% of 500
    (0.1, 7, 2, (7, 3)),
    # 7 rows are 420px, not under 60% of 700
    (0.9, 4, 7, (4, 7)),
    (0.1, 7, 7, (7, 7)),
])
def test_new_wave_growth(fixed_random, roll, columns, rows, expected):
    game = Game(500, 700, rng=fixed_random(roll))
    game.columns, game.rows = columns, rows
    game.new_wave()
    assert (game.columns, game.rows) == expected
    wave = game.waves[-1]
    assert len(game.waves) == 2
    assert len(wave.enemies) == expected[0] * expected[1]


def test_game_over_is_sticky(game, ctx):
    game.end_game("test")
    for _ in range(5):
        game.render(ctx)
    assert game.game_over
    game.end_game("again")
    assert game.game_over


def test_restart_resets_everything(game, ctx):
    game.columns, game.rows = 5, 4
    game.new_wave()
    game.wave_count = 6
    game.score = 42
    game.player.lives = 0
    game.player.x = 0
    game.end_game("test")
    game.restart()
    assert not game.game_over
    assert game.score == 0
    assert game.wave_count == 1
    assert (game.columns, game.rows) == (2, 2)
    assert len(game.waves) == 1
    assert len(game.waves[0].enemies) == 4
    assert game.waves[0].y == -game.waves[0].height
    assert game.player.lives == 3
    assert game.player.x == 200


def test_score_never_negative_under_mixed_collisions(game):
    rng = random.Random(7)
    for _ in range(200):
        enemy = waveinvader.Enemy(game, 0, 0)
        if rng.random() < 0.5:
            game.projectile_pool[0].start(30, 120)
            enemy.update(0, 100)
        else:
            enemy.update(game.player.x, game.player.y - 10)
        assert game.score >= 0


def test_hud_shows_score_wave_and_lives(game, ctx):
    game.score = 7
    game.draw_status_text(ctx)
    assert ctx.texts() == ["Score: 7", "Wave: 1"]
    pips = [c for c in ctx.calls if c[0] == "fill_rect"]
    assert pips == [
        ("fill_rect", 20, 100, 5, 20),
        ("fill_rect", 30, 100, 5, 20),
        ("fill_rect", 40, 100, 5, 20),
    ]


def test_hud_game_over_message(game, ctx):
    game.end_game("test")
    game.draw_status_text(ctx)
    texts = [c for c in ctx.calls if c[0] == "fill_text"]
    assert texts[2] == ("fill_text", "Game over!!", 250, 350, waveinvader.FONT_GAME_OVER, "center")
    assert texts[3] == ("fill_text", "Press R to restart!", 250, 380, waveinvader.FONT_HINT, "center")
    assert ctx.depth == 0
