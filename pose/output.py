"""
Read-only view over the PoseNet model outputs.

Tensors are channel-major ``[channel][row][col]``:
    heatmap          [NUM_JOINTS][H][W]      joint confidence
    offsets          [2*NUM_JOINTS][H][W]    y at joint, x at joint + NUM_JOINTS
    displacement_fwd [2*NUM_EDGES][H][W]     parent -> child vectors
    displacement_bwd [2*NUM_EDGES][H][W]     child -> parent vectors
"""

import math
from enum import Enum
from typing import Mapping, Optional, Tuple

import numpy as np

from config import ModelConfig
from .skeleton import JointName, NUM_EDGES, NUM_JOINTS
from .structures import Cell, Point, Vector


class OutputFeature(Enum):
    """Names of the model's output features."""
    HEATMAP = ModelConfig.HEATMAP_FEATURE
    OFFSETS = ModelConfig.OFFSETS_FEATURE
    FORWARD_DISPLACEMENT = ModelConfig.FORWARD_DISPLACEMENT_FEATURE
    BACKWARD_DISPLACEMENT = ModelConfig.BACKWARD_DISPLACEMENT_FEATURE


def _round_half_away(value: float) -> int:
    """Round to the nearest integer, halves away from zero."""
    return int(math.copysign(math.floor(abs(value) + 0.5), value))


class PoseNetOutput:
    """
    Immutable accessor over the four output tensors plus grid geometry.

    Attributes:
        model_input_size: (width, height) of the image fed to the model
        output_stride: Pixels per output grid cell
        height: Grid rows (``heatmap.shape[1]``)
        width: Grid columns (``heatmap.shape[2]``)
    """

    def __init__(
        self,
        heatmap: np.ndarray,
        offsets: np.ndarray,
        displacement_fwd: np.ndarray,
        displacement_bwd: np.ndarray,
        model_input_size: Tuple[int, int] = (ModelConfig.INPUT_WIDTH, ModelConfig.INPUT_HEIGHT),
        output_stride: int = ModelConfig.OUTPUT_STRIDE
    ):
        self.heatmap = self._freeze(heatmap, "heatmap")
        self.offsets = self._freeze(offsets, "offsets")
        self.displacement_fwd = self._freeze(displacement_fwd, "displacement_fwd")
        self.displacement_bwd = self._freeze(displacement_bwd, "displacement_bwd")
        self.model_input_size = (model_input_size[0], model_input_size[1])
        self.output_stride = int(output_stride)

    @classmethod
    def from_prediction(
        cls,
        prediction: Mapping[str, np.ndarray],
        model_input_size: Tuple[int, int] = (ModelConfig.INPUT_WIDTH, ModelConfig.INPUT_HEIGHT),
        output_stride: int = ModelConfig.OUTPUT_STRIDE
    ) -> "PoseNetOutput":
        """
        Build a view from the model's named outputs.

        Args:
            prediction: Mapping of feature name to array (e.g. an ``np.load`` result)
            model_input_size: (width, height) of the model input
            output_stride: Model output stride

        Raises:
            KeyError: If any of the four features is missing
        """
        arrays = {}
        for feature in OutputFeature:
            if feature.value not in prediction:
                raise KeyError(f"Missing model output feature: {feature.value}")
            arrays[feature] = prediction[feature.value]

        return cls(
            heatmap=arrays[OutputFeature.HEATMAP],
            offsets=arrays[OutputFeature.OFFSETS],
            displacement_fwd=arrays[OutputFeature.FORWARD_DISPLACEMENT],
            displacement_bwd=arrays[OutputFeature.BACKWARD_DISPLACEMENT],
            model_input_size=model_input_size,
            output_stride=output_stride,
        )

    @staticmethod
    def _freeze(tensor: np.ndarray, label: str) -> np.ndarray:
        array = np.array(tensor, dtype=np.float64)
        if array.ndim != 3:
            raise ValueError(f"{label} must be 3-D [channel][row][col], got shape {array.shape}")
        array.setflags(write=False)
        return array

    @property
    def height(self) -> int:
        return self.heatmap.shape[1]

    @property
    def width(self) -> int:
        return self.heatmap.shape[2]

    def contains(self, cell: Cell) -> bool:
        return 0 <= cell.row < self.height and 0 <= cell.col < self.width

    def _read(self, tensor: np.ndarray, channel: int, cell: Cell) -> float:
        if not 0 <= channel < tensor.shape[0]:
            raise IndexError(f"Channel {channel} out of range for shape {tensor.shape}")
        if not (0 <= cell.row < tensor.shape[1] and 0 <= cell.col < tensor.shape[2]):
            raise IndexError(f"Cell {tuple(cell)} out of range for shape {tensor.shape}")
        return float(tensor[channel, cell.row, cell.col])

    def confidence(self, joint: JointName, cell: Cell) -> float:
        """Heatmap value for ``joint`` at ``cell``."""
        return self._read(self.heatmap, int(joint), cell)

    def offset(self, joint: JointName, cell: Cell) -> Vector:
        """Sub-grid (dx, dy) correction for ``joint`` at ``cell``."""
        dy = self._read(self.offsets, int(joint), cell)
        dx = self._read(self.offsets, int(joint) + NUM_JOINTS, cell)
        return (dx, dy)

    def position(self, joint: JointName, cell: Cell) -> Point:
        """Model-space (x, y) of ``joint`` at ``cell``: coarse grid position plus offset."""
        dx, dy = self.offset(joint, cell)
        return (cell.col * self.output_stride + dx, cell.row * self.output_stride + dy)

    def cell_for(self, position: Point) -> Optional[Cell]:
        """Nearest grid cell to a model-space position, or None if off the grid."""
        row = _round_half_away(position[1] / self.output_stride)
        col = _round_half_away(position[0] / self.output_stride)
        cell = Cell(row, col)
        if not self.contains(cell):
            return None
        return cell

    def forward_displacement(self, edge_index: int, cell: Cell) -> Vector:
        """Parent -> child (dx, dy) for the edge at ``cell``."""
        return self._displacement(self.displacement_fwd, edge_index, cell)

    def backward_displacement(self, edge_index: int, cell: Cell) -> Vector:
        """Child -> parent (dx, dy) for the edge at ``cell``."""
        return self._displacement(self.displacement_bwd, edge_index, cell)

    def _displacement(self, tensor: np.ndarray, edge_index: int, cell: Cell) -> Vector:
        if not 0 <= edge_index < NUM_EDGES:
            raise IndexError(f"Edge index {edge_index} out of range")
        dy = self._read(tensor, edge_index, cell)
        dx = self._read(tensor, edge_index + NUM_EDGES, cell)
        return (dx, dy)
