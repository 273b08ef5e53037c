"""
Pytest configuration and fixtures for the PoseNet decoder tests.
"""

import sys
import pytest
import numpy as np
from pathlib import Path

# Add project root to path
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from pose import EDGES, NUM_EDGES, NUM_JOINTS, JointName, PoseNetOutput  # noqa: E402

STRIDE = 16
MODEL_INPUT_SIZE = 513
GRID_SIZE = MODEL_INPUT_SIZE // STRIDE + 1  # 33

# (row, col) of each joint relative to a pose anchor cell
SKELETON_LAYOUT = {
    JointName.NOSE: (1, 2),
    JointName.LEFT_EYE: (0, 3),
    JointName.RIGHT_EYE: (0, 1),
    JointName.LEFT_EAR: (1, 4),
    JointName.RIGHT_EAR: (1, 0),
    JointName.LEFT_SHOULDER: (3, 3),
    JointName.RIGHT_SHOULDER: (3, 1),
    JointName.LEFT_ELBOW: (5, 4),
    JointName.RIGHT_ELBOW: (5, 0),
    JointName.LEFT_WRIST: (7, 4),
    JointName.RIGHT_WRIST: (7, 0),
    JointName.LEFT_HIP: (7, 3),
    JointName.RIGHT_HIP: (7, 1),
    JointName.LEFT_KNEE: (9, 3),
    JointName.RIGHT_KNEE: (9, 1),
    JointName.LEFT_ANKLE: (11, 3),
    JointName.RIGHT_ANKLE: (11, 1),
}


class TensorSet:
    """Mutable tensors used to build a PoseNetOutput in tests."""

    def __init__(self, grid_size: int = GRID_SIZE, stride: int = STRIDE):
        self.grid_size = grid_size
        self.stride = stride
        shape = (grid_size, grid_size)
        self.heatmap = np.zeros((NUM_JOINTS,) + shape)
        self.offsets = np.zeros((2 * NUM_JOINTS,) + shape)
        self.displacement_fwd = np.zeros((2 * NUM_EDGES,) + shape)
        self.displacement_bwd = np.zeros((2 * NUM_EDGES,) + shape)

    def add_pose(self, anchor, confidence=0.9, x_offset=0.0):
        """
        Place one skeleton at ``anchor`` with consistent displacement vectors.

        Every joint gets a heatmap peak and the same x offset; forward and
        backward displacements point exactly at the adjacent joint.
        """
        cells = {}
        positions = {}
        for name, (drow, dcol) in SKELETON_LAYOUT.items():
            row, col = anchor[0] + drow, anchor[1] + dcol
            cells[name] = (row, col)
            positions[name] = (col * self.stride + x_offset, row * self.stride)
            self.heatmap[name, row, col] = confidence
            self.offsets[name + NUM_JOINTS, row, col] = x_offset

        for edge in EDGES:
            px, py = positions[edge.parent]
            cx, cy = positions[edge.child]
            prow, pcol = cells[edge.parent]
            crow, ccol = cells[edge.child]
            self.displacement_fwd[edge.index, prow, pcol] = cy - py
            self.displacement_fwd[edge.index + NUM_EDGES, prow, pcol] = cx - px
            self.displacement_bwd[edge.index, crow, ccol] = py - cy
            self.displacement_bwd[edge.index + NUM_EDGES, crow, ccol] = px - cx

        return positions

    def output(self, model_input_size=None) -> PoseNetOutput:
        if model_input_size is None:
            size = (self.grid_size - 1) * self.stride + 1
            model_input_size = (size, size)
        return PoseNetOutput(
            heatmap=self.heatmap,
            offsets=self.offsets,
            displacement_fwd=self.displacement_fwd,
            displacement_bwd=self.displacement_bwd,
            model_input_size=model_input_size,
            output_stride=self.stride,
        )


@pytest.fixture
def tensors():
    """Empty 33x33 tensor set for a 513px model with stride 16."""
    return TensorSet()


@pytest.fixture
def small_tensors():
    """Empty 11x11 tensor set for fast exhaustive tests."""
    return TensorSet(grid_size=11)


@pytest.fixture
def random_output():
    """Random, well-formed 33x33 output."""
    rng = np.random.default_rng(7)
    shape = (GRID_SIZE, GRID_SIZE)
    return PoseNetOutput(
        heatmap=rng.random((NUM_JOINTS,) + shape),
        offsets=rng.normal(0.0, 8.0, (2 * NUM_JOINTS,) + shape),
        displacement_fwd=rng.normal(0.0, 40.0, (2 * NUM_EDGES,) + shape),
        displacement_bwd=rng.normal(0.0, 40.0, (2 * NUM_EDGES,) + shape),
        model_input_size=(MODEL_INPUT_SIZE, MODEL_INPUT_SIZE),
        output_stride=STRIDE,
    )
