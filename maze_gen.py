#Perfect maze generation and path marking
#Mazes are built by randomly joining disjoint path sets until the whole grid is one set
#Paths are found with a right hand depth-first walk that only uses the per-cell markers

#To print a 10x10 maze as text, run "python3 maze_gen.py"
#To draw a solved 20x30 maze as a PNG, run "python3 maze_gen.py -d 20x30 -s -g maze.png"
#To store a maze and solve it later, run "python3 maze_gen.py -c maze.txt" then "python3 maze_gen.py -L maze.txt -s"

from __future__ import annotations

import argparse
import random
import sys
import time
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Callable, List, Optional, Tuple


class Direction(IntEnum):
    UP = 0
    RIGHT = 1
    DOWN = 2
    LEFT = 3


DELTAS = {
    Direction.UP: (-1, 0),
    Direction.RIGHT: (0, 1),
    Direction.DOWN: (1, 0),
    Direction.LEFT: (0, -1),
}

OPPOSITE = {
    Direction.UP: Direction.DOWN,
    Direction.RIGHT: Direction.LEFT,
    Direction.DOWN: Direction.UP,
    Direction.LEFT: Direction.RIGHT,
}

RandomFn = Callable[[], float]


def turn_right(direction: Direction) -> Direction:
    return Direction((direction + 1) % 4)


@dataclass
class Cell:
    right_wall: bool = True
    bottom_wall: bool = True
    marker: Direction = Direction.UP
    visited: bool = False


@dataclass(frozen=True)
class Exit:
    #An opening in the outer wall: the side it is on and the offset along that side
    #Exits are only metadata, the walls of the grid are never changed for them
    side: Direction
    offset: int

    def encode(self) -> int:
        return self.offset * 4 + int(self.side)

    @classmethod
    def decode(cls, value: int) -> "Exit":
        if value < 0:
            raise ValueError(f"Invalid exit value {value}")
        return cls(Direction(value % 4), value // 4)

    def side_length(self, maze: "Maze") -> int:
        return maze.cols if self.side in (Direction.UP, Direction.DOWN) else maze.rows

    def fits(self, maze: "Maze") -> bool:
        return 0 <= self.offset < self.side_length(maze)

    def cell(self, maze: "Maze") -> Tuple[int, int]:
        if self.side == Direction.UP:
            return 0, self.offset
        if self.side == Direction.DOWN:
            return maze.rows - 1, self.offset
        if self.side == Direction.LEFT:
            return self.offset, 0
        return self.offset, maze.cols - 1


EXIT_SIDES = {
    "t": Direction.UP,
    "u": Direction.UP,
    "^": Direction.UP,
    "l": Direction.LEFT,
    "<": Direction.LEFT,
    "r": Direction.RIGHT,
    ">": Direction.RIGHT,
    "b": Direction.DOWN,
    "d": Direction.DOWN,
    "v": Direction.DOWN,
}


def parse_exit(text: str) -> Exit:
    #Side letter followed by a 1-based position along that side, e.g. "t3" or "<1"
    text = text.strip()
    if not text or text[0].lower() not in EXIT_SIDES:
        raise ValueError(f"Unknown exit side in {text!r}")
    try:
        position = int(text[1:])
    except ValueError:
        raise ValueError(f"Invalid exit position in {text!r}") from None
    if position < 1:
        raise ValueError(f"Exit positions start at 1, got {position}")
    return Exit(EXIT_SIDES[text[0].lower()], position - 1)


class Maze:
#Rectangular grid of cells stored flat in row-major order
#Each cell only owns its right and bottom walls, the top and left walls belong to the neighbours
#The outer boundary is always closed, exits are drawn by the output writers

    def __init__(self, rows: int, cols: int):
        if rows < 1 or cols < 1:
            raise ValueError(f"A maze must have at least one row and one column, got {rows}x{cols}")
        self.rows = rows
        self.cols = cols
        self.cells: List[Cell] = [Cell() for _ in range(rows * cols)]
        self.exit_1 = Exit(Direction.LEFT, 0)
        self.exit_2 = Exit(Direction.RIGHT, rows - 1)

    def __len__(self) -> int:
        return len(self.cells)

    def __getitem__(self, pos: Tuple[int, int]) -> Cell:
        return self.cell(*pos)

    def index(self, row: int, col: int) -> int:
        if not self.contains(row, col):
            raise IndexError(f"Cell {row}x{col} is outside a {self.rows}x{self.cols} maze")
        return row * self.cols + col

    def position(self, index: int) -> Tuple[int, int]:
        return divmod(index, self.cols)

    def contains(self, row: int, col: int) -> bool:
        return 0 <= row < self.rows and 0 <= col < self.cols

    def cell(self, row: int, col: int) -> Cell:
        return self.cells[self.index(row, col)]

    def reset(self) -> None:
        for cell in self.cells:
            cell.right_wall = True
            cell.bottom_wall = True
            cell.marker = Direction.UP
            cell.visited = False

    def unmark(self) -> None:
        for cell in self.cells:
            cell.marker = Direction.UP
            cell.visited = False

    def clear(self) -> None:
        self.cells = []
        self.rows = 0
        self.cols = 0

    def can_move(self, row: int, col: int, direction: Direction) -> bool:
        if direction == Direction.UP:
            return row > 0 and not self.cells[(row - 1) * self.cols + col].bottom_wall
        if direction == Direction.RIGHT:
            return col < self.cols - 1 and not self.cells[row * self.cols + col].right_wall
        if direction == Direction.DOWN:
            return row < self.rows - 1 and not self.cells[row * self.cols + col].bottom_wall
        return col > 0 and not self.cells[row * self.cols + col - 1].right_wall

    def remove_wall(self, row: int, col: int, direction: Direction) -> Tuple[int, int]:
        #Knocks down the wall on the given side and returns the neighbour behind it
        dr, dc = DELTAS[direction]
        nr, nc = row + dr, col + dc
        if not self.contains(nr, nc):
            raise ValueError(f"Cannot open the outer wall at {row}x{col} going {direction.name}")
        if direction == Direction.UP:
            self.cell(nr, nc).bottom_wall = False
        elif direction == Direction.RIGHT:
            self.cell(row, col).right_wall = False
        elif direction == Direction.DOWN:
            self.cell(row, col).bottom_wall = False
        else:
            self.cell(nr, nc).right_wall = False
        return nr, nc

    def neighbors(self, row: int, col: int) -> List[Tuple[int, int]]:
        return [
            (row + DELTAS[direction][0], col + DELTAS[direction][1])
            for direction in Direction
            if self.can_move(row, col, direction)
        ]

    def open_walls(self) -> int:
        count = 0
        for row in range(self.rows):
            for col in range(self.cols):
                cell = self.cells[row * self.cols + col]
                if col < self.cols - 1 and not cell.right_wall:
                    count += 1
                if row < self.rows - 1 and not cell.bottom_wall:
                    count += 1
        return count

    def is_connected(self) -> bool:
        if not self.cells:
            return False
        seen = {(0, 0)}
        stack = [(0, 0)]
        while stack:
            row, col = stack.pop()
            for nxt in self.neighbors(row, col):
                if nxt not in seen:
                    seen.add(nxt)
                    stack.append(nxt)
        return len(seen) == len(self.cells)

    def path_cells(self) -> List[Tuple[int, int]]:
        return [self.position(i) for i, cell in enumerate(self.cells) if cell.visited]


class DisjointSets:
    #Union-find over cell indices, only alive while a maze is being generated
    #No ranks are kept, find() compresses every path it walks

    def __init__(self, size: int):
        self.parent: List[int] = list(range(size))

    def find(self, pos: int) -> int:
        root = pos
        while self.parent[root] != root:
            root = self.parent[root]
        while self.parent[pos] != root:
            self.parent[pos], pos = root, self.parent[pos]
        return root

    def union(self, a: int, b: int) -> None:
        root_a = self.find(a)
        root_b = self.find(b)
        if root_a != root_b:
            self.parent[root_a] = root_b

    def same(self, a: int, b: int) -> bool:
        return self.find(a) == self.find(b)


def random_index(random_fn: RandomFn, size: int) -> int:
    #Scales a [0, 1) sample to an index below size, clamped in case the source returns 1.0
    return min(int(random_fn() * size), size - 1)


def adjacent_mask(maze: Maze, sets: DisjointSets, pos: int) -> int:
    #Bit d is set when the neighbour in direction d lies in another path set
    own = sets.find(pos)
    row, col = maze.position(pos)
    mask = 0
    for direction in Direction:
        dr, dc = DELTAS[direction]
        nr, nc = row + dr, col + dc
        if maze.contains(nr, nc) and sets.find(nr * maze.cols + nc) != own:
            mask |= 1 << direction
    return mask


def pick_direction(mask: int, skip: int) -> Direction:
    for direction in Direction:
        if (mask >> direction) & 1:
            if skip == 0:
                return direction
            skip -= 1
    raise ValueError(f"No direction left in adjacency mask {mask:#x}")


def generate(maze: Maze, random_fn: Optional[RandomFn] = None) -> Maze:
    #Randomized union of path sets
    #Every pass shuffles the unsettled cells and lets each one knock down a wall to a
    #neighbour from another set, a cell whose neighbours all share its set is settled for good
    #Each knocked wall joins two sets so the result is a spanning tree
    if random_fn is None:
        random_fn = random.random
    #A MemoryError at any point leaves the maze with every wall standing
    maze.reset()
    try:
        _join_path_sets(maze, random_fn)
    except MemoryError:
        maze.reset()
        raise
    return maze


def _join_path_sets(maze: Maze, random_fn: RandomFn) -> None:
    n_cells = len(maze.cells)
    sets = DisjointSets(n_cells)
    queue = list(range(n_cells))

    while queue:
        for pos in range(len(queue) - 1, 0, -1):
            exch = random_index(random_fn, pos + 1)
            queue[pos], queue[exch] = queue[exch], queue[pos]

        pending = []
        for cur in queue:
            mask = adjacent_mask(maze, sets, cur)
            count = bin(mask).count("1")
            if count == 0:
                continue
            skip = random_index(random_fn, count) if count > 1 else 0
            direction = pick_direction(mask, skip)
            row, col = maze.position(cur)
            nr, nc = maze.remove_wall(row, col, direction)
            sets.union(nr * maze.cols + nc, cur)
            pending.append(cur)
        queue = pending


def find_path(maze: Maze, start: Tuple[int, int], goal: Tuple[int, int]) -> List[Tuple[int, int]]:
    #Right hand depth-first walk from start to goal, the maze must be connected or this never ends
    #
    #Forward search: a cell's marker is the last direction tried from it, so scanning
    #resumes one step clockwise of it; on entering a cell its marker points back the way we came
    #Path marking: once the goal is reached the marker of every cell on the route points
    #one step closer to the goal, so following markers from start visits exactly that route
    start, goal = tuple(start), tuple(goal)
    for row, col in (start, goal):
        if not maze.contains(row, col):
            raise ValueError(f"Cell {row + 1}x{col + 1} out of range for a {maze.rows}x{maze.cols} maze")

    maze.unmark()
    row, col = start

    while (row, col) != goal:
        cell = maze.cells[row * maze.cols + col]
        direction = cell.marker
        for _ in range(4):
            direction = turn_right(direction)
            if maze.can_move(row, col, direction):
                break
        else:
            raise ValueError(f"Cell {row + 1}x{col + 1} is walled in on every side")
        cell.marker = direction
        dr, dc = DELTAS[direction]
        row, col = row + dr, col + dc
        maze.cells[row * maze.cols + col].marker = OPPOSITE[direction]

    path = []
    row, col = start
    while (row, col) != goal:
        cell = maze.cells[row * maze.cols + col]
        cell.visited = True
        path.append((row, col))
        dr, dc = DELTAS[cell.marker]
        row, col = row + dr, col + dc
    maze.cells[row * maze.cols + col].visited = True
    path.append((row, col))
    return path


#CLI


FORMAT_NAMES = {
    "text": "Text",
    "png": "PNG",
    "eps": "PostScript",
    "compact": "Compact",
}


@dataclass
class OutputConfig:
    format: str = "text"
    area: Tuple[int, int] = (612, 612)
    target: Optional[str] = None
    view: bool = False
    binary: bool = field(init=False, default=False)

    def __post_init__(self):
        self.binary = self.format == "png"

    def target_name(self) -> str:
        return self.target if self.target else "<standard output>"


def parse_dims(text: str) -> Tuple[int, int]:
    #"AxB" with optional whitespace around the numbers
    first, sep, second = text.partition("x")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected AxB, got {text!r}")
    try:
        return int(first), int(second)
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected AxB, got {text!r}") from None


def parse_endpoints(text: str) -> Tuple[Tuple[int, int], Tuple[int, int]]:
    #"RxC-RxC", 1-based on the command line, 0-based once parsed
    first, sep, second = text.partition("-")
    if not sep:
        raise argparse.ArgumentTypeError(f"expected RxC-RxC, got {text!r}")
    (r1, c1), (r2, c2) = parse_dims(first), parse_dims(second)
    return (r1 - 1, c1 - 1), (r2 - 1, c2 - 1)


def exit_arg(text: str) -> Exit:
    try:
        return parse_exit(text)
    except ValueError as e:
        raise argparse.ArgumentTypeError(str(e)) from None


def seed_arg(text: str) -> int:
    #Same bases as strtoul with base 0: "0x" prefix is hex, a leading zero is octal
    text = text.strip()
    base = 10
    if text[:2].lower() == "0x":
        base = 16
    elif len(text) > 1 and text.startswith("0"):
        base = 8
    try:
        value = int(text, base)
    except ValueError:
        raise argparse.ArgumentTypeError(f"seed must be an unsigned integer, got {text!r}") from None
    if value < 0:
        raise argparse.ArgumentTypeError(f"seed must be an unsigned integer, got {text!r}")
    return value


def build_output_config(args) -> OutputConfig:
    return OutputConfig(
        format=args.format,
        area=args.area,
        target=args.output,
        view=args.view,
    )


def parse_args(argv: Optional[List[str]] = None):
    parser = argparse.ArgumentParser(prog="mazegen", description="Perfect maze generator with optional solution marking.")
    parser.add_argument("-d", dest="dims", type=parse_dims, default=(10, 10), metavar="RxC", help="Maze dimensions (rows x columns).")
    parser.add_argument("-z", dest="area", type=parse_dims, default=(612, 612), metavar="HxV", help="Output area: pixels for PNG, points for EPS, ignored for text.")
    parser.add_argument("-r", dest="seed", type=seed_arg, default=None, help="Random seed, 0x for hex or a leading 0 for octal (default: current time).")
    parser.add_argument("-m", dest="solution", type=parse_endpoints, metavar="RxC-RxC", help="Mark a path between two cells (1-based).")
    parser.add_argument("-e", dest="entrance", type=exit_arg, default=None, metavar="dPOS", help="Entrance position, edge T/L/B/R followed by a 1-based position.")
    parser.add_argument("-x", dest="exit", type=exit_arg, default=None, metavar="dPOS", help="Exit position, edge T/L/B/R followed by a 1-based position.")
    parser.add_argument("-L", dest="load", default=None, metavar="FILE", help="Load a stored maze ('-' for stdin).")
    parser.add_argument("-c", dest="format", action="store_const", const="compact", help="Write the compact stored format.")
    parser.add_argument("-g", dest="format", action="store_const", const="png", help="Write PNG output.")
    parser.add_argument("-p", dest="format", action="store_const", const="eps", help="Write EPS output.")
    parser.add_argument("-t", dest="format", action="store_const", const="text", help="Write plain text output (default).")
    parser.add_argument("-s", dest="solution", action="store_const", const="exits", help="Mark the solution from entrance to exit.")
    parser.add_argument("--view", action="store_true", help="Show the maze in a pygame window.")
    parser.add_argument("output", nargs="?", default=None, help="Output file (default: standard output).")
    #-m and -s share a destination so the later one wins
    parser.set_defaults(format="text", solution=None)
    return parser.parse_args(argv)


def error(message: str) -> int:
    print(f"Error:  {message}\n", file=sys.stderr)
    return 1


def load_maze(path: str) -> Maze:
    from maze_output import load

    if path == "-":
        return load(sys.stdin)
    with open(path, "r") as f:
        return load(f)


def write_maze(maze: Maze, config: OutputConfig, stream) -> None:
    import maze_output

    width, height = config.area
    if config.format == "text":
        maze_output.write_text(maze, stream)
    elif config.format == "eps":
        maze_output.write_eps(maze, stream, width, height)
    elif config.format == "compact":
        maze_output.store(maze, stream)
    elif config.format == "png":
        from visualizer import write_png

        write_png(maze, stream, width, height)
    else:
        raise ValueError(f"Unknown output format {config.format!r}")


def print_summary(maze: Maze, config: OutputConfig, seed: int, endpoints) -> None:
    width, height = config.area
    print("Maze parameters:", file=sys.stderr)
    print(f"  Dimensions:  {maze.rows}x{maze.cols}", file=sys.stderr)
    print(f" Output area:  {width}x{height}", file=sys.stderr)
    print(f"      Format:  {FORMAT_NAMES[config.format]}", file=sys.stderr)
    print(f" Random seed:  {seed}", file=sys.stderr)
    print(f"      Target:  {config.target_name()}", file=sys.stderr)
    if endpoints is None:
        print("    Solution:  NONE", file=sys.stderr)
    else:
        (r1, c1), (r2, c2) = endpoints
        print(f"    Solution:  ({r1 + 1} x {c1 + 1}) to ({r2 + 1} x {c2 + 1})", file=sys.stderr)


def run(args) -> int:
    config = build_output_config(args)
    seed = args.seed if args.seed is not None else int(time.time())
    rows, cols = args.dims

    if rows < 1 or cols < 1:
        return error("A maze must have at least one row and one column")
    if config.format in ("png", "eps") and (config.area[0] < 1 or config.area[1] < 1):
        return error("Output area requires nonzero dimensions")

    #Output is opened before the maze is built or loaded
    if config.target:
        try:
            f = open(config.target, "wb" if config.binary else "w", newline=None if config.binary else "")
        except OSError as e:
            return error(f"Unable to open output file '{config.target}'\n  -- {e.strerror}")
        with f:
            return produce(args, config, seed, f)
    return produce(args, config, seed, sys.stdout.buffer if config.binary else sys.stdout)


def produce(args, config: OutputConfig, seed: int, stream) -> int:
    rows, cols = args.dims
    if args.load is not None:
        try:
            maze = load_maze(args.load)
        except OSError as e:
            return error(f"Unable to open input file '{args.load}'\n  -- {e.strerror}")
        except ValueError as e:
            return error(f"Unable to load maze from input stream\n  -- {e}")
    else:
        maze = Maze(rows, cols)
        if args.entrance is not None:
            maze.exit_1 = args.entrance
        if args.exit is not None:
            maze.exit_2 = args.exit
        for name, opening in (("entrance", maze.exit_1), ("exit", maze.exit_2)):
            if not opening.fits(maze):
                return error(
                    f"The {name} position {opening.offset + 1} is off its edge\n"
                    f"  -- that edge has {opening.side_length(maze)} cells"
                )
        try:
            generate(maze, random.Random(seed).random)
        except MemoryError:
            maze.clear()
            return error(f"Insufficient memory to generate {rows} x {cols} maze")

    endpoints = args.solution
    if endpoints == "exits":
        if not (maze.exit_1.fits(maze) and maze.exit_2.fits(maze)):
            return error("Stored exits do not lie on the maze boundary")
        endpoints = (maze.exit_1.cell(maze), maze.exit_2.cell(maze))

    if endpoints is not None:
        for name, (r, c) in zip(("Source", "Target"), endpoints):
            if not maze.contains(r, c):
                return error(
                    f"{name} position {r + 1}x{c + 1} out of range\n"
                    f"  -- maze dimensions are {maze.rows}x{maze.cols}"
                )
        if args.load is not None and not maze.is_connected():
            return error("Loaded maze is not connected, refusing to search it")
        find_path(maze, *endpoints)

    print_summary(maze, config, seed, endpoints)
    write_maze(maze, config, stream)

    if config.view:
        from visualizer import MazeViewer

        MazeViewer(maze, title_suffix=f" - {maze.rows}x{maze.cols} seed {seed}").run()

    maze.clear()
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = parse_args(argv)
    return run(args)


if __name__ == "__main__":
    sys.exit(main())
