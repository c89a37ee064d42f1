import enum
import logging
from typing import Iterator, NamedTuple, Optional, Tuple
from tabulate import tabulate


logger = logging.getLogger(__name__)

INPUT_FILE = './data.txt'
VERBOSE = False


class Delta(NamedTuple):
  horizontal: int
  vertical: int


class Position(NamedTuple):
  horizontal: int
  depth: int


Course = Tuple[Delta, ...]


class Propulsion(enum.Enum):
  DIRECT = 'direct'
  AIMED = 'aimed'


PROPULSION = Propulsion.AIMED

# Checked in this order.
COMMAND_TO_DELTA = {
    'forward': Delta(1, 0),
    'up': Delta(0, -1),
    'down': Delta(0, 1),
}
NO_OP = Delta(0, 0)


def parse_line(x: str) -> Delta:
  """Returns the movement delta for one line.

  Lines that aren't `<keyword> <N>` are a no-op. A known keyword followed by
  something other than a decimal literal raises ValueError.
  """
  tokens = x.split()
  if len(tokens) != 2:
    logger.debug('Unrecognised line %r', x)
    return NO_OP
  cmd, magnitude = tokens
  for keyword, unit in COMMAND_TO_DELTA.items():
    if cmd == keyword:
      if not (magnitude.isascii() and magnitude.isdigit()):
        raise ValueError(f'Invalid magnitude for {cmd}: {magnitude!r}')
      value = int(magnitude)
      return Delta(unit.horizontal * value, unit.vertical * value)
  logger.debug('Unrecognised line %r', x)
  return NO_OP


def read_input(fname: Optional[str] = INPUT_FILE) -> Course:
  """Returns the course described in fname, empty if it can't be opened."""
  directions = []
  try:
    file = open(fname, 'rb')
  except OSError as e:
    logger.warning('Could not open %s: %s', fname, e)
    return ()
  with file:
    lineno = 0
    try:
      for lineno, raw in enumerate(file, start=1):
        try:
          line = raw.decode('utf-8')
        except UnicodeDecodeError:
          logger.warning('Skipping unreadable line %d of %s', lineno, fname)
          continue
        directions.append(parse_line(line.strip()))
    except OSError as e:
      logger.warning('Stopped reading %s after line %d: %s', fname, lineno, e)
  return tuple(directions)


def propel_step(pos: Position, aim: int, delta: Delta,
                propulsion: Propulsion) -> Tuple[Position, int]:
  """Returns position and aim after applying a single delta."""
  if propulsion is Propulsion.DIRECT:
    return Position(pos.horizontal + delta.horizontal,
                    pos.depth + delta.vertical), aim
  # down/up only steer; forward X moves X along and aim * X down.
  if delta.horizontal > 0:
    x = delta.horizontal
    return Position(pos.horizontal + x, pos.depth + aim * x), aim
  return pos, aim + delta.vertical


def propel_steps(course: Course,
                 propulsion: Propulsion) -> Iterator[Tuple[Position, int]]:
  """Yields position and aim after each delta of the course, in order."""
  pos = Position(0, 0)
  aim = 0
  for delta in course:
    pos, aim = propel_step(pos, aim, delta, propulsion)
    yield pos, aim


def propel_sub(course: Course,
               propulsion: Propulsion = Propulsion.AIMED
               ) -> Tuple[Position, int]:
  final = (Position(0, 0), 0)
  for final in propel_steps(course, propulsion):
    pass
  return final


def solve(course: Course, propulsion: Propulsion = PROPULSION,
          verbose: bool = False) -> Tuple[Position, int]:
  if verbose:
    rows = []
    max_aim = 0
    pos, aim = Position(0, 0), 0
    for idx, (delta, (pos, aim)) in enumerate(
        zip(course, propel_steps(course, propulsion))):
      rows.append([idx, tuple(delta), pos.horizontal, pos.depth, aim])
      max_aim = max(max_aim, aim)
    print(tabulate(rows, headers=['#', 'delta', 'horizontal', 'depth', 'aim']))
    print(f'Max aim: {max_aim}')
  else:
    pos, aim = propel_sub(course, propulsion)
  print(f'     Horizontal position {pos.horizontal}, depth {pos.depth}, '
        f'aim {aim}, area {pos.horizontal * pos.depth}')
  return pos, aim


def main():
  logging.basicConfig(level=logging.WARNING)
  print('Calculate the horizontal position and depth you would have after '
        'following the planned course.')
  print('What do you get if you multiply your final horizontal position by '
        'your final depth? ')
  course = read_input(INPUT_FILE)
  solve(course, PROPULSION, verbose=VERBOSE)


if __name__ == '__main__':
  main()
