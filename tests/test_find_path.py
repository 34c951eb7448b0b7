import random

import pytest

from conftest import tree_distance, wall_layout
from maze_gen import Direction, Maze, find_path


def assert_simple_route(maze, path, start, goal):
    assert path[0] == start
    assert path[-1] == goal
    assert len(set(path)) == len(path)
    for (r1, c1), (r2, c2) in zip(path, path[1:]):
        assert (r2, c2) in maze.neighbors(r1, c1)
    assert sorted(path) == sorted(maze.path_cells())


def test_path_length_matches_tree_distance(make_maze):
    maze = make_maze(8, 11, seed=7)
    rng = random.Random(42)
    for _ in range(25):
        start = (rng.randrange(maze.rows), rng.randrange(maze.cols))
        goal = (rng.randrange(maze.rows), rng.randrange(maze.cols))
        path = find_path(maze, start, goal)
        assert_simple_route(maze, path, start, goal)
        assert len(path) - 1 == tree_distance(maze, start, goal)


def test_corner_to_corner_on_large_maze(make_maze):
    maze = make_maze(40, 60, seed=11)
    path = find_path(maze, (0, 0), (39, 59))
    assert_simple_route(maze, path, (0, 0), (39, 59))
    assert len(path) - 1 == tree_distance(maze, (0, 0), (39, 59))


def test_start_equals_goal_marks_one_cell(make_maze):
    maze = make_maze(5, 5)
    assert find_path(maze, (2, 3), (2, 3)) == [(2, 3)]
    assert maze.path_cells() == [(2, 3)]


def test_single_cell_maze(make_maze):
    maze = make_maze(1, 1)
    assert find_path(maze, (0, 0), (0, 0)) == [(0, 0)]
    assert maze.cell(0, 0).visited


def test_two_by_two_scenario(make_maze):
    for seed in range(10):
        maze = make_maze(2, 2, seed=seed)
        assert maze.open_walls() == 3
        path = find_path(maze, (0, 0), (1, 1))
        assert len(path) - 1 == tree_distance(maze, (0, 0), (1, 1))
        assert len(path) == 3


def test_resolving_clears_previous_marks(make_maze):
    maze = make_maze(10, 10, seed=5)
    find_path(maze, (0, 0), (9, 9))
    second = find_path(maze, (9, 0), (0, 9))
    assert sorted(maze.path_cells()) == sorted(second)
    assert len(second) - 1 == tree_distance(maze, (9, 0), (0, 9))


def test_solver_never_changes_walls(make_maze):
    maze = make_maze(7, 7, seed=8)
    before = wall_layout(maze)
    find_path(maze, (6, 0), (0, 6))
    assert wall_layout(maze) == before


def test_markers_point_along_route():
    maze = Maze(1, 3)
    maze.cell(0, 0).right_wall = False
    maze.cell(0, 1).right_wall = False
    assert find_path(maze, (0, 0), (0, 2)) == [(0, 0), (0, 1), (0, 2)]
    assert maze.cell(0, 0).marker == Direction.RIGHT
    assert maze.cell(0, 1).marker == Direction.RIGHT
    #The goal keeps the back pointer it was given on arrival
    assert maze.cell(0, 2).marker == Direction.LEFT


def test_route_ignores_dead_ends_explored_first():
    #Column 0 is a corridor with a dead-end spur to the right of the top cell
    maze = Maze(3, 2)
    maze.cell(0, 0).right_wall = False
    maze.cell(0, 0).bottom_wall = False
    maze.cell(1, 0).bottom_wall = False
    maze.cell(1, 0).right_wall = False
    maze.cell(1, 1).bottom_wall = False
    path = find_path(maze, (0, 0), (2, 0))
    assert path == [(0, 0), (1, 0), (2, 0)]
    assert not maze.cell(0, 1).visited
    assert not maze.cell(1, 1).visited


def test_walled_in_start_raises():
    maze = Maze(2, 2)
    with pytest.raises(ValueError):
        find_path(maze, (0, 0), (1, 1))


def test_out_of_range_endpoints_raise(make_maze):
    maze = make_maze(3, 3)
    with pytest.raises(ValueError):
        find_path(maze, (0, 0), (3, 0))
    with pytest.raises(ValueError):
        find_path(maze, (-1, 0), (0, 0))
