from enum import IntEnum
from typing import List, Optional, Tuple
import numpy as np
import tensorflow as tf
from dive import solution
from dive.solution import Course, Delta, Position, Propulsion


AOC_INPUT_FILE = solution.INPUT_FILE
# [horizontal, depth, aim, FWD_binary, UP_binary, DOWN_binary, magnitude]
INPUT_WIDTH = 7
# [horizontal, depth, aim]
TARGET_WIDTH = 3


class Commands(IntEnum):
  FORWARD = 0
  UP = 1
  DOWN = 2

  @classmethod
  def values(cls):
    return list(map(lambda c: c.value, cls))

CMD_TO_DELTA = {
    Commands.FORWARD: solution.COMMAND_TO_DELTA['forward'],
    Commands.UP: solution.COMMAND_TO_DELTA['up'],
    Commands.DOWN: solution.COMMAND_TO_DELTA['down'],
}


def command_from_delta(delta: Delta) -> Tuple[Commands, int]:
  """Returns the command and magnitude that parse into delta."""
  if delta.horizontal != 0:
    return Commands.FORWARD, delta.horizontal
  if delta.vertical < 0:
    return Commands.UP, -delta.vertical
  # Delta(0, 0) behaves like `down 0` under either propulsion.
  return Commands.DOWN, delta.vertical


def command_to_delta(cmd: Commands, magnitude: int) -> Delta:
  unit = CMD_TO_DELTA[cmd]
  return Delta(unit.horizontal * magnitude, unit.vertical * magnitude)


def command_idx_to_onehot(idx: int) -> np.ndarray:
  all_onehots = np.eye(len(Commands))
  command_onehot = np.squeeze(all_onehots[idx])
  return command_onehot


def make_input(pos: Position, aim: int, cmd: Commands,
               magnitude: int) -> np.ndarray:
  values = np.concatenate([
      [pos.horizontal, pos.depth, aim],
      command_idx_to_onehot(cmd.value),
      [magnitude],
  ])
  return values.astype(np.float32)


def make_target(pos: Position, aim: int) -> np.ndarray:
  return np.array([pos.horizontal, pos.depth, aim], dtype=np.float32)


def solve_cumulative(
    course: Course,
    propulsion: Propulsion = Propulsion.AIMED,
) -> Tuple[List[np.ndarray], List[np.ndarray]]:
  """Returns one (input, target) pair per step along the course."""
  inputs = []
  targets = []

  old_pos = Position(0, 0)
  old_aim = 0
  for delta in course:
    cmd, magnitude = command_from_delta(delta)
    inputs.append(make_input(old_pos, old_aim, cmd, magnitude))
    new_pos, new_aim = solution.propel_step(old_pos, old_aim, delta, propulsion)
    targets.append(make_target(new_pos, new_aim))
    old_pos, old_aim = new_pos, new_aim
  return inputs, targets


class SyntheticGenerator():
  """Generates synthetic single-step examples."""

  def __init__(self,
      propulsion: Propulsion = Propulsion.AIMED,
      min_pos: int = 50,
      max_pos: int = 400,
      min_aim: int = -20,
      max_aim: int = 200,
      min_magnitude: int = 0,
      max_magnitude: int = 20,
      rng_seed: Optional[int] = 112233):
    self.propulsion = propulsion
    self.rng_state = np.random.RandomState(rng_seed)
    self.min_pos = min_pos
    self.max_pos = max_pos
    self.min_aim = min_aim
    self.max_aim = max_aim
    self.min_magnitude = min_magnitude
    self.max_magnitude = max_magnitude

  def sample(self) -> Tuple[np.ndarray, np.ndarray]:
    # pick initial state
    horizontal, depth = self.rng_state.randint(
        low = self.min_pos,
        high = self.max_pos,
        size=(2)
    )
    pos = Position(int(horizontal), int(depth))
    aim = 0
    if self.propulsion is Propulsion.AIMED:
      aim = int(self.rng_state.randint(low=self.min_aim, high=self.max_aim))

    # pick command
    command_idx = self.rng_state.randint(
        low = 0,
        high = len(Commands.values()),
    )
    cmd = Commands(int(command_idx))

    # pick magnitude
    magnitude = int(self.rng_state.randint(
        low = self.min_magnitude,
        high = self.max_magnitude,
    ))

    delta = command_to_delta(cmd, magnitude)
    new_pos, new_aim = solution.propel_step(pos, aim, delta, self.propulsion)
    return make_input(pos, aim, cmd, magnitude), make_target(new_pos, new_aim)

  def generator(self):
    def _generator():
      while True:
        yield self.sample()
    return _generator


class AOCInputGenerator():

  def __init__(self, input_file: str = AOC_INPUT_FILE,
               propulsion: Propulsion = Propulsion.AIMED):
    course = solution.read_input(input_file)
    self._inputs, self._targets = solve_cumulative(course, propulsion)
    self._num_examples = len(self._inputs)

  def __len__(self):
    return self._num_examples

  def generator(self):
    def _generator():
      for i in range(self._num_examples):
        yield self._inputs[i], self._targets[i]
    return _generator


class BatchDataset:

  def __init__(self, generator):
    self._generator = generator

  def __call__(self, batch_size: int) -> tf.data.Dataset:
    ds = tf.data.Dataset.from_generator(
            self._generator,
            output_signature=(
                tf.TensorSpec(shape=(INPUT_WIDTH,), dtype=tf.float32),
                tf.TensorSpec(shape=(TARGET_WIDTH,), dtype=tf.float32),
            ),
    )
    ds = ds.batch(batch_size=batch_size)
    return ds
