#Pygame drawing for mazes: PNG output and an interactive viewer
#Drawing never touches the maze, exits only leave gaps in what gets drawn

from __future__ import annotations

import pygame

from maze_gen import Direction
from maze_output import exit_at, has_bottom_wall, has_right_wall, marker_in_path

COLORS = {
    "wall": (0, 0, 0),
    "floor": (255, 255, 255),
    "path": (102, 102, 255),
    "stats": (25, 25, 25),
    "text": (235, 235, 235),
    "background": (10, 10, 10),
}


def solution_rect(maze, row, col, h_wid, v_wid, left=0, top=0):
    #The block for a path cell stretches into the neighbour its marker points at
    #so consecutive blocks join up into one corridor
    h_base = left + col * h_wid
    v_base = top + row * v_wid
    marker = maze.cell(row, col).marker
    if not marker_in_path(maze, row, col):
        return pygame.Rect(h_base + 2, v_base + 2, h_wid - 3, v_wid - 3)
    if marker in (Direction.UP, Direction.DOWN):
        width, height = h_wid - 4, 2 * v_wid - 4
    else:
        width, height = 2 * h_wid - 4, v_wid - 4
    if marker == Direction.LEFT:
        h_base -= h_wid
    elif marker == Direction.UP:
        v_base -= v_wid
    return pygame.Rect(h_base + 2, v_base + 2, width + 1, height + 1)


def draw_maze(surface, maze, h_wid, v_wid, left=0, top=0, show_solution=True):
    wall = COLORS["wall"]

    #Top and left outer walls, the right and bottom ones come from the cells themselves
    for c in range(maze.cols):
        if not exit_at(maze, Direction.UP, c):
            pygame.draw.line(surface, wall, (left + c * h_wid, top), (left + c * h_wid + h_wid, top))
    for r in range(maze.rows):
        if not exit_at(maze, Direction.LEFT, r):
            pygame.draw.line(surface, wall, (left, top + r * v_wid), (left, top + r * v_wid + v_wid))

    for r in range(maze.rows):
        v_base = top + r * v_wid
        for c in range(maze.cols):
            h_base = left + c * h_wid
            if has_right_wall(maze, r, c):
                pygame.draw.line(surface, wall, (h_base + h_wid, v_base), (h_base + h_wid, v_base + v_wid))
            if has_bottom_wall(maze, r, c):
                pygame.draw.line(surface, wall, (h_base, v_base + v_wid), (h_base + h_wid, v_base + v_wid))
            if show_solution and maze.cell(r, c).visited:
                pygame.draw.rect(surface, COLORS["path"], solution_rect(maze, r, c, h_wid, v_wid, left, top))


def cell_size(maze, width, height):
    return max(1, width // maze.cols), max(1, height // maze.rows)


def render(maze, width, height, show_solution=True):
    surface = pygame.Surface((width + 1, height + 1))
    surface.fill(COLORS["floor"])
    h_wid, v_wid = cell_size(maze, width, height)
    draw_maze(surface, maze, h_wid, v_wid, show_solution=show_solution)
    return surface


def write_png(maze, stream, width, height):
    pygame.image.save(render(maze, width, height), stream, "maze.png")


class MazeViewer:
    #Shows one maze and its marked path in a resizable window

    def __init__(
        self,
        maze,
        tile_size=24,
        stats_height=60,
        title_suffix="",
    ):
        self.maze = maze
        self.tile_size = tile_size
        self.stats_height = stats_height
        self.title_suffix = title_suffix
        self.show_solution = True

    def _compute_layout(self, container_w, container_h):
        usable_w = max(320, container_w - 16)
        usable_h = max(240, container_h - 16)

        tile_size = self.tile_size
        stats_height = self.stats_height
        for _ in range(4):
            max_tile_w = max(4, usable_w // self.maze.cols)
            max_tile_h = max(4, (usable_h - stats_height) // self.maze.rows)
            tile_size = max(4, min(max_tile_w, max_tile_h))
            line_height = max(16, int(18 * tile_size / 24))
            stats_height = max(40, line_height * 2)

        view_width = self.maze.cols * tile_size
        view_height = self.maze.rows * tile_size
        return tile_size, stats_height, view_width, view_height

    def stats_lines(self):
        path_len = len(self.maze.path_cells())
        return [
            f"{self.maze.rows}x{self.maze.cols} maze",
            f"path cells: {path_len if path_len else '-'}  solution: {'on' if self.show_solution else 'off'}",
        ]

    def run(self):
        pygame.init()
        display_info = pygame.display.Info()
        default_w = max(640, int(display_info.current_w * 0.9))
        default_h = max(480, int(display_info.current_h * 0.8))
        screen = pygame.display.set_mode((default_w, default_h), pygame.RESIZABLE)
        pygame.display.set_caption(f"Maze{self.title_suffix}")
        tile_size, stats_height, view_width, view_height = self._compute_layout(*screen.get_size())
        font_size = max(14, int(18 * tile_size / 24))
        font = pygame.font.SysFont(None, font_size)
        clock = pygame.time.Clock()
        fullscreen = False
        last_window_size = screen.get_size()

        running = True
        while running:
            clock.tick(30)
            tile_size, stats_height, view_width, view_height = self._compute_layout(*screen.get_size())
            new_font_size = max(14, int(18 * tile_size / 24))
            if new_font_size != font_size:
                font_size = new_font_size
                font = pygame.font.SysFont(None, font_size)
            for event in pygame.event.get():
                if event.type == pygame.QUIT or (
                    event.type == pygame.KEYDOWN and event.key == pygame.K_ESCAPE
                ):
                    running = False
                if event.type == pygame.VIDEORESIZE and not fullscreen:
                    last_window_size = (event.w, event.h)
                    screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)
                if event.type == pygame.KEYDOWN and event.key == pygame.K_s:
                    self.show_solution = not self.show_solution
                if event.type == pygame.KEYDOWN and event.key == pygame.K_f:
                    fullscreen = not fullscreen
                    if fullscreen:
                        display_info = pygame.display.Info()
                        screen = pygame.display.set_mode((display_info.current_w, display_info.current_h), pygame.FULLSCREEN)
                    else:
                        screen = pygame.display.set_mode(last_window_size, pygame.RESIZABLE)

            screen.fill(COLORS["background"])
            offset = 8
            pygame.draw.rect(screen, COLORS["floor"], pygame.Rect(offset, offset, view_width + 1, view_height + 1))
            draw_maze(screen, self.maze, tile_size, tile_size, offset, offset, self.show_solution)

            line_height = max(16, int(18 * tile_size / 24))
            pad = 6
            stats_rect = pygame.Rect(offset, offset + view_height + pad, view_width + 1, stats_height)
            pygame.draw.rect(screen, COLORS["stats"], stats_rect)
            for i, text in enumerate(self.stats_lines()):
                surface = font.render(text, True, COLORS["text"])
                screen.blit(surface, (stats_rect.x + pad, stats_rect.y + pad + i * line_height))

            pygame.display.flip()

        pygame.quit()
