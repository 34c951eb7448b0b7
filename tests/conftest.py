import os
import random
from collections import deque

import pytest

os.environ.setdefault("SDL_VIDEODRIVER", "dummy")
os.environ.setdefault("PYGAME_HIDE_SUPPORT_PROMPT", "1")

from maze_gen import Maze, generate


def tree_distance(maze, start, goal):
    #Plain BFS over open walls, independent of the solver under test
    q = deque([start])
    dist = {start: 0}
    while q:
        cur = q.popleft()
        if cur == goal:
            return dist[cur]
        for nxt in maze.neighbors(*cur):
            if nxt not in dist:
                dist[nxt] = dist[cur] + 1
                q.append(nxt)
    return None


def wall_layout(maze):
    return [(cell.right_wall, cell.bottom_wall) for cell in maze.cells]


@pytest.fixture
def make_maze():
    def factory(rows, cols, seed=1234):
        return generate(Maze(rows, cols), random.Random(seed).random)
    return factory
