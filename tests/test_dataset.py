"""Tests for the single-step learning dataset."""

from pathlib import Path

import numpy as np
import pytest

from dive import dataset
from dive.dataset import (
    AOCInputGenerator,
    BatchDataset,
    Commands,
    SyntheticGenerator,
    command_from_delta,
    command_idx_to_onehot,
    solve_cumulative,
)
from dive.solution import Delta, Position, Propulsion, propel_step

TEST_FILE = Path(__file__).parent / 'test.txt'

SAMPLE_COURSE = (
    Delta(5, 0),
    Delta(0, 5),
    Delta(8, 0),
    Delta(0, -3),
    Delta(0, 8),
    Delta(2, 0),
)


@pytest.mark.parametrize('delta, expected', [
    (Delta(5, 0), (Commands.FORWARD, 5)),
    (Delta(0, -3), (Commands.UP, 3)),
    (Delta(0, 8), (Commands.DOWN, 8)),
    (Delta(0, 0), (Commands.DOWN, 0)),
])
def test_command_from_delta(delta, expected):
  assert command_from_delta(delta) == expected


def test_command_roundtrips_through_delta():
  for delta in SAMPLE_COURSE:
    assert dataset.command_to_delta(*command_from_delta(delta)) == delta


def test_onehot():
  np.testing.assert_array_equal(command_idx_to_onehot(Commands.UP.value),
                                [0., 1., 0.])


class TestSolveCumulative:

  def test_shapes(self):
    inputs, targets = solve_cumulative(SAMPLE_COURSE)
    assert len(inputs) == len(targets) == 6
    assert all(i.shape == (dataset.INPUT_WIDTH,) for i in inputs)
    assert all(t.shape == (dataset.TARGET_WIDTH,) for t in targets)
    assert inputs[0].dtype == np.float32

  def test_aimed_values(self):
    inputs, targets = solve_cumulative(SAMPLE_COURSE, Propulsion.AIMED)
    # forward 8 from (5, 0) with aim 5
    np.testing.assert_array_equal(inputs[2], [5, 0, 5, 1, 0, 0, 8])
    np.testing.assert_array_equal(targets[2], [13, 40, 5])
    np.testing.assert_array_equal(targets[-1], [15, 60, 10])

  def test_direct_values(self):
    inputs, targets = solve_cumulative(SAMPLE_COURSE, Propulsion.DIRECT)
    np.testing.assert_array_equal(inputs[3], [13, 5, 0, 0, 1, 0, 3])
    np.testing.assert_array_equal(targets[-1], [15, 10, 0])

  def test_each_target_feeds_next_input(self):
    inputs, targets = solve_cumulative(SAMPLE_COURSE)
    for target, next_input in zip(targets, inputs[1:]):
      np.testing.assert_array_equal(target, next_input[:3])


class TestSyntheticGenerator:

  @pytest.mark.parametrize('propulsion', list(Propulsion))
  def test_targets_follow_propulsion(self, propulsion):
    gen = SyntheticGenerator(propulsion=propulsion, rng_seed=7)
    for _ in range(50):
      values, target = gen.sample()
      pos = Position(int(values[0]), int(values[1]))
      aim = int(values[2])
      cmd = Commands(int(np.argmax(values[3:6])))
      delta = dataset.command_to_delta(cmd, int(values[6]))
      new_pos, new_aim = propel_step(pos, aim, delta, propulsion)
      np.testing.assert_array_equal(
          target, [new_pos.horizontal, new_pos.depth, new_aim])

  def test_direct_has_no_aim(self):
    gen = SyntheticGenerator(propulsion=Propulsion.DIRECT)
    values, _ = gen.sample()
    assert values[2] == 0

  def test_seeded(self):
    a, _ = SyntheticGenerator(rng_seed=3).sample()
    b, _ = SyntheticGenerator(rng_seed=3).sample()
    np.testing.assert_array_equal(a, b)


def test_aoc_input_generator():
  aoc_generator = AOCInputGenerator(str(TEST_FILE))
  assert len(aoc_generator) == 6
  pairs = list(aoc_generator.generator()())
  np.testing.assert_array_equal(pairs[-1][1], [15, 60, 10])


def test_aoc_input_generator_missing_file(tmp_path):
  assert len(AOCInputGenerator(str(tmp_path / 'missing.txt'))) == 0


class TestBatchDataset:

  def test_aoc_batches(self):
    ds = BatchDataset(AOCInputGenerator(str(TEST_FILE)).generator())
    batches = list(ds(batch_size=4).as_numpy_iterator())
    assert [b[0].shape for b in batches] == [(4, 7), (2, 7)]
    assert [b[1].shape for b in batches] == [(4, 3), (2, 3)]
    np.testing.assert_array_equal(batches[-1][1][-1], [15, 60, 10])

  def test_synthetic_batches(self):
    ds = BatchDataset(SyntheticGenerator().generator())
    inputs, targets = next(ds(batch_size=10).as_numpy_iterator())
    assert inputs.shape == (10, 7)
    assert targets.shape == (10, 3)
