#Text based maze output: the compact stored format, plain text drawings and EPS pages
#None of the writers change the maze, exits are only opened in what gets written

from __future__ import annotations

import io
from typing import Iterator, TextIO

from maze_gen import DELTAS, Direction, Exit, Maze

LINE_WIDTH = 80


class MazeFormatError(ValueError):
    pass


#Exit helpers shared with the pygame renderer


def exit_at(maze: Maze, side: Direction, offset: int) -> bool:
    return any(e.side == side and e.offset == offset for e in (maze.exit_1, maze.exit_2))


def has_right_wall(maze: Maze, row: int, col: int) -> bool:
    if col == maze.cols - 1 and exit_at(maze, Direction.RIGHT, row):
        return False
    return maze.cell(row, col).right_wall


def has_bottom_wall(maze: Maze, row: int, col: int) -> bool:
    if row == maze.rows - 1 and exit_at(maze, Direction.DOWN, col):
        return False
    return maze.cell(row, col).bottom_wall


def marker_in_path(maze: Maze, row: int, col: int) -> bool:
    #False for a lone path cell (start == goal), its marker was never pointed at a neighbour
    dr, dc = DELTAS[maze.cell(row, col).marker]
    return maze.contains(row + dr, col + dc) and maze.cell(row + dr, col + dc).visited


#Compact format


def encode_cell(cell) -> str:
    value = (int(cell.marker) << 2) | (int(cell.bottom_wall) << 1) | int(cell.right_wall)
    return chr((ord("A") if cell.visited else ord("a")) + value)


def store(maze: Maze, stream: TextIO) -> None:
    stream.write(f"{maze.rows} {maze.cols} {maze.exit_1.encode()} {maze.exit_2.encode()}\n")
    pos = 0
    for cell in maze.cells:
        stream.write(encode_cell(cell))
        pos = (pos + 1) % LINE_WIDTH
        if not pos:
            stream.write("\n")
    if pos:
        stream.write("\n")


def dumps(maze: Maze) -> str:
    out = io.StringIO()
    store(maze, out)
    return out.getvalue()


def _letters(text: str) -> Iterator[str]:
    for ch in text:
        if not ch.isspace():
            yield ch


def load(stream: TextIO) -> Maze:
    header = stream.readline()
    fields = header.split()
    if len(fields) < 4:
        raise MazeFormatError("missing dimension line")
    try:
        rows, cols, exit_1, exit_2 = (int(v) for v in fields[:4])
    except ValueError:
        raise MazeFormatError(f"malformed dimension line {header.strip()!r}") from None
    if rows < 1 or cols < 1:
        raise MazeFormatError(f"invalid dimensions {rows}x{cols}")

    maze = Maze(rows, cols)
    try:
        maze.exit_1 = Exit.decode(exit_1)
        maze.exit_2 = Exit.decode(exit_2)
    except ValueError as e:
        raise MazeFormatError(str(e)) from None

    letters = _letters(stream.read())
    for row in range(rows):
        for col in range(cols):
            ch = next(letters, None)
            if ch is None:
                raise MazeFormatError(f"premature end of input at {row} x {col}")
            visited = ch.isupper()
            value = ord(ch) - (ord("A") if visited else ord("a"))
            if not ch.isascii() or not 0 <= value < 16:
                raise MazeFormatError(f"invalid cell code {ch!r} at {row} x {col}")
            cell = maze.cells[row * cols + col]
            cell.right_wall = bool(value & 1)
            cell.bottom_wall = bool((value >> 1) & 1)
            cell.marker = Direction((value >> 2) & 3)
            cell.visited = visited
    return maze


def loads(text: str) -> Maze:
    return load(io.StringIO(text))


#Plain text


def write_text(maze: Maze, stream: TextIO) -> None:
    top = "".join("+   " if exit_at(maze, Direction.UP, c) else "+---" for c in range(maze.cols))
    stream.write(top + "+\n")

    for r in range(maze.rows):
        line = [" " if exit_at(maze, Direction.LEFT, r) else "|"]
        for c in range(maze.cols):
            line.append(" @ " if maze.cell(r, c).visited else "   ")
            line.append("|" if has_right_wall(maze, r, c) else " ")
        stream.write("".join(line) + "\n")

        line = ["+"]
        for c in range(maze.cols):
            line.append("---+" if has_bottom_wall(maze, r, c) else "   +")
        stream.write("".join(line) + "\n")


#Encapsulated PostScript

EPS_LINE_WIDTH = 1.0
EPS_LINE_GREY = 0.0
EPS_SOLUTION_GREY = 0.7
EPS_SOLUTION_GAP = 0.2

EPS_DEFINITIONS = (
    "/np  {newpath} bind def\n"
    "/slw {setlinewidth} bind def\n"
    "/sg  {setgray} bind def\n"
    "/mt  {moveto} bind def\n"
    "/rmt {rmoveto} bind def\n"
    "/lt  {lineto} bind def\n"
    "/rlt {rlineto} bind def\n"
    "/stk {stroke} bind def\n"
    "/sgrey %.1f def\n"
    "/lgrey %.1f def\n"
    "/lwid  %.1f def\n"
    "/dr {lwid slw lgrey sg stk} def\n\n"
)


def write_eps(maze: Maze, stream: TextIO, width: int, height: int) -> None:
    h_wid = float(width) / maze.cols
    v_wid = float(height) / maze.rows
    gap = EPS_SOLUTION_GAP

    stream.write(
        "%%!PS-Adobe-3.0 EPSF-3.0\n"
        "%%%%BoundingBox: %d %d %u %u\n"
        "%%%%DocumentData: Clean7Bit\n\n" % (-2, -2, width + 2, height + 2)
    )
    stream.write(EPS_DEFINITIONS % (EPS_SOLUTION_GREY, EPS_LINE_GREY, EPS_LINE_WIDTH))

    #PostScript puts the origin at the bottom left, so rows are flipped against height
    stream.write("%% Exterior walls\nnp\n%u %u mt\n" % (0, height))
    for c in range(maze.cols):
        op = "rmt" if exit_at(maze, Direction.UP, c) else "rlt"
        stream.write("%.1f 0 %s " % (h_wid, op))
    stream.write("dr\nnp\n%u %u mt\n" % (0, height))
    for r in range(maze.rows):
        op = "rmt" if exit_at(maze, Direction.LEFT, r) else "rlt"
        stream.write("0 %.1f neg %s " % (v_wid, op))
    stream.write("dr\n\n")

    for r in range(maze.rows):
        v_base = r * v_wid
        for c in range(maze.cols):
            h_base = c * h_wid
            right = has_right_wall(maze, r, c)
            bottom = has_bottom_wall(maze, r, c)
            if right or bottom:
                stream.write("np ")
                if right:
                    stream.write("%.1f %.1f mt 0 %.1f neg rlt " % (h_base + h_wid, height - v_base, v_wid))
                if bottom:
                    stream.write("%.1f %.1f mt %.1f 0 rlt " % (h_base, height - v_base - v_wid, h_wid))
                stream.write("dr\n")

            cell = maze.cell(r, c)
            if not cell.visited:
                continue
            #Each path block reaches from the cell toward the neighbour its marker points at
            reaches = marker_in_path(maze, r, c)
            if not reaches:
                h_dis = (1.0 - 2 * gap) * h_wid
                v_dis = (1.0 - 2 * gap) * v_wid
            elif cell.marker in (Direction.UP, Direction.DOWN):
                h_dis = (1.0 - 2 * gap) * h_wid
                v_dis = (2.0 - 2 * gap) * v_wid
            else:
                h_dis = (2.0 - 2 * gap) * h_wid
                v_dis = (1.0 - 2 * gap) * v_wid
            if not reaches:
                hp = h_base + gap * h_wid
                vp = v_base + gap * v_wid
            elif cell.marker == Direction.UP:
                hp = h_base + gap * h_wid
                vp = v_base - (1.0 - gap) * v_wid
            elif cell.marker == Direction.LEFT:
                hp = h_base - (1.0 - gap) * h_wid
                vp = v_base + gap * v_wid
            else:
                hp = h_base + gap * h_wid
                vp = v_base + gap * v_wid
            stream.write(
                "np %.1f %.1f mt %.1f 0 rlt 0 %.1f neg rlt %.1f neg 0 rlt 0 %.1f rlt "
                % (hp, height - vp, h_dis, v_dis, h_dis, v_dis)
            )
            stream.write("sgrey sg fill\n")
