import io

import pygame

from maze_gen import Direction, Exit, Maze, find_path
from visualizer import COLORS, MazeViewer, render, solution_rect, write_png


def rgb(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


def test_render_size_and_exit_gaps():
    maze = Maze(1, 1)
    surface = render(maze, 100, 100)
    assert surface.get_size() == (101, 101)
    assert rgb(surface, 50, 0) == COLORS["wall"]
    assert rgb(surface, 50, 100) == COLORS["wall"]
    #Default exits open the left side of row 0 and the right side of the last row
    assert rgb(surface, 0, 50) == COLORS["floor"]
    assert rgb(surface, 100, 50) == COLORS["floor"]
    assert rgb(surface, 50, 50) == COLORS["floor"]


def test_render_fills_solution():
    maze = Maze(1, 1)
    find_path(maze, (0, 0), (0, 0))
    surface = render(maze, 100, 100)
    assert rgb(surface, 50, 50) == COLORS["path"]


def test_render_can_hide_solution():
    maze = Maze(1, 1)
    find_path(maze, (0, 0), (0, 0))
    assert rgb(render(maze, 100, 100, show_solution=False), 50, 50) == COLORS["floor"]


def test_render_does_not_open_walls():
    maze = Maze(2, 2)
    maze.exit_2 = Exit(Direction.DOWN, 1)
    render(maze, 40, 40)
    assert maze.cell(1, 1).bottom_wall
    assert maze.cell(1, 1).right_wall


def test_solution_block_reaches_next_cell():
    maze = Maze(1, 2)
    maze.cell(0, 0).right_wall = False
    find_path(maze, (0, 0), (0, 1))
    rect = solution_rect(maze, 0, 0, 10, 10)
    assert rect == pygame.Rect(2, 2, 17, 7)
    #The goal points back at the cell it was entered from
    assert solution_rect(maze, 0, 1, 10, 10) == pygame.Rect(2, 2, 17, 7)


def test_write_png_produces_png_bytes(make_maze):
    maze = make_maze(6, 6)
    find_path(maze, (0, 0), (5, 5))
    out = io.BytesIO()
    write_png(maze, out, 120, 120)
    assert out.getvalue().startswith(b"\x89PNG\r\n\x1a\n")


def test_viewer_stats_lines(make_maze):
    maze = make_maze(4, 3)
    find_path(maze, (0, 0), (3, 2))
    viewer = MazeViewer(maze)
    lines = viewer.stats_lines()
    assert lines[0] == "4x3 maze"
    assert f"path cells: {len(maze.path_cells())}" in lines[1]


def test_viewer_layout_fits_window():
    viewer = MazeViewer(Maze(10, 20))
    tile_size, stats_height, view_width, view_height = viewer._compute_layout(800, 600)
    assert view_width == 20 * tile_size
    assert view_height == 10 * tile_size
    assert view_width <= 800
    assert view_height + stats_height <= 600
