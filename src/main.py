"""Entry point for the Tilestorm match-three prototype.

Sets up a GameSession and a minimal Arcade window that draws the board, turns a
press-and-release over two tiles into a swap request and ticks the session.
"""
import sys
from typing import Optional, Tuple

import arcade
from arcade import Window, run, set_background_color, color

from tilestorm.components.tile import ResourceKind
from tilestorm.events.bus import EVENT_GAME_LOST, EVENT_TILE_SWAP_INVALID
from tilestorm.session import GameSession
from tilestorm.settings import Settings, load_settings

TILE_SIZE = 64
BOTTOM_MARGIN = 20
HUD_HEIGHT = 60

KIND_COLORS = {
    ResourceKind.SUN: (232, 196, 64),
    ResourceKind.EARTH: (139, 94, 60),
    ResourceKind.WIND: (190, 210, 225),
    ResourceKind.WATER: (60, 120, 200),
    ResourceKind.TREE: (63, 127, 59),
}
DISASTER_COLOR = (179, 18, 42)


class TilestormWindow(Window):
    def __init__(self, settings: Settings):
        self.session = GameSession(settings)
        cols, rows = settings.board_cols, settings.board_rows
        super().__init__(cols * TILE_SIZE, rows * TILE_SIZE + BOTTOM_MARGIN + HUD_HEIGHT, "Tilestorm")
        self.set_update_rate(1/60)
        self.pressed: Optional[Tuple[int, int]] = None
        self.flash = 0.0
        self.session.event_bus.subscribe(EVENT_TILE_SWAP_INVALID, self.on_swap_invalid)
        self.session.event_bus.subscribe(EVENT_GAME_LOST, self.on_game_lost)
        self.session.setup()
        set_background_color(color.BLACK)

    def on_swap_invalid(self, sender, **kwargs):
        self.flash = 0.3

    def on_game_lost(self, sender, **kwargs):
        self.pressed = None

    def _cell_at(self, x: float, y: float) -> Optional[Tuple[int, int]]:
        col = int(x // TILE_SIZE)
        row = int((y - BOTTOM_MARGIN) // TILE_SIZE)
        settings = self.session.settings
        if y < BOTTOM_MARGIN or not (0 <= col < settings.board_cols and 0 <= row < settings.board_rows):
            return None
        return col, row

    def on_draw(self):
        self.clear()
        settings = self.session.settings
        for row in range(settings.board_rows):
            for col in range(settings.board_cols):
                view = self.session.get_tile_at((col, row))
                if view.is_empty:
                    continue
                left = col * TILE_SIZE + 2
                bottom = BOTTOM_MARGIN + row * TILE_SIZE + 2
                fill = DISASTER_COLOR if view.is_disaster else KIND_COLORS[view.kind]
                arcade.draw_lrbt_rectangle_filled(left, left + TILE_SIZE - 4, bottom, bottom + TILE_SIZE - 4, fill)
                if self.pressed == (col, row):
                    arcade.draw_lrbt_rectangle_outline(left, left + TILE_SIZE - 4, bottom, bottom + TILE_SIZE - 4, color.WHITE, 3)
        hud_y = BOTTOM_MARGIN + settings.board_rows * TILE_SIZE + 10
        next_move = self.session.get_time_until_next_disaster_move()
        status = "GAME OVER" if self.session.lost else f"next move {next_move:0.0f}s"
        text_color = color.RED if self.flash > 0 else color.WHITE
        arcade.draw_text(f"Score {self.session.score:07d}", 8, hud_y + 22, text_color, 14)
        arcade.draw_text(f"Wave {self.session.get_current_wave()}  {status}", 8, hud_y, color.LIGHT_GRAY, 12)

    def on_update(self, delta_time: float):
        self.flash = max(0.0, self.flash - delta_time)
        self.session.tick(delta_time)

    def on_mouse_press(self, x: float, y: float, button: int, modifiers: int):
        if self.session.lost:
            return
        cell = self._cell_at(x, y)
        if cell is not None and not self.session.get_tile_at(cell).is_disaster:
            self.pressed = cell

    def on_mouse_release(self, x: float, y: float, button: int, modifiers: int):
        src, self.pressed = self.pressed, None
        dst = self._cell_at(x, y)
        if src is None or dst is None or src == dst:
            return
        self.session.attempt_swap(src, dst)


def main():
    settings = load_settings(sys.argv[1]) if len(sys.argv) > 1 else Settings()
    TilestormWindow(settings)
    run()

if __name__ == "__main__":
    main()
