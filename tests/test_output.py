"""
Tests for the PoseNetOutput tensor view.
"""

import pytest
import numpy as np


class TestGeometry:
    """Grid size and coordinate conversion."""

    def test_height_width_from_heatmap(self, tensors):
        output = tensors.output()
        assert output.height == 33
        assert output.width == 33

    def test_default_model_geometry(self, tensors):
        from pose import PoseNetOutput

        output = PoseNetOutput(
            tensors.heatmap, tensors.offsets, tensors.displacement_fwd, tensors.displacement_bwd
        )
        assert output.model_input_size == (513, 513)
        assert output.output_stride == 16

    def test_position_adds_offset(self, tensors):
        from pose import Cell, JointName, NUM_JOINTS

        tensors.offsets[JointName.LEFT_KNEE, 4, 6] = 3.0
        tensors.offsets[JointName.LEFT_KNEE + NUM_JOINTS, 4, 6] = -2.5
        output = tensors.output()

        assert output.position(JointName.LEFT_KNEE, Cell(4, 6)) == (6 * 16 - 2.5, 4 * 16 + 3.0)
        assert output.offset(JointName.LEFT_KNEE, Cell(4, 6)) == (-2.5, 3.0)

    def test_cell_round_trip(self, small_tensors):
        """cell_for(position(cell)) == cell for every in-bounds cell with zero offsets."""
        from pose import Cell, JointName

        output = small_tensors.output()
        for row in range(output.height):
            for col in range(output.width):
                cell = Cell(row, col)
                assert output.cell_for(output.position(JointName.NOSE, cell)) == cell

    def test_cell_for_rounds_to_nearest(self, tensors):
        from pose import Cell

        output = tensors.output()
        assert output.cell_for((23.9, 40.1)) == Cell(3, 1)
        assert output.cell_for((24.0, 8.0)) == Cell(1, 2)

    def test_cell_for_negative_half_rounds_away_from_zero(self, tensors):
        """-0.5 cells rounds to -1 (off the grid), not to 0."""
        output = tensors.output()
        assert output.cell_for((-8.0, 0.0)) is None
        assert output.cell_for((0.0, -8.0)) is None

    def test_cell_for_off_grid(self, tensors):
        output = tensors.output()
        assert output.cell_for((-9.0, 10.0)) is None
        assert output.cell_for((10.0, 33 * 16.0)) is None

    def test_cell_for_edge_of_grid(self, tensors):
        from pose import Cell

        output = tensors.output()
        assert output.cell_for((-7.9, 32 * 16 + 7.9)) == Cell(32, 0)


class TestReads:
    """Confidence and displacement reads."""

    def test_confidence(self, tensors):
        from pose import Cell, JointName

        tensors.heatmap[JointName.RIGHT_HIP, 5, 9] = 0.42
        output = tensors.output()
        assert output.confidence(JointName.RIGHT_HIP, Cell(5, 9)) == pytest.approx(0.42)

    def test_forward_displacement(self, tensors):
        from pose import Cell, NUM_EDGES

        tensors.displacement_fwd[3, 2, 2] = 12.0
        tensors.displacement_fwd[3 + NUM_EDGES, 2, 2] = -4.0
        output = tensors.output()
        assert output.forward_displacement(3, Cell(2, 2)) == (-4.0, 12.0)
        assert output.backward_displacement(3, Cell(2, 2)) == (0.0, 0.0)

    def test_backward_displacement(self, tensors):
        from pose import Cell, NUM_EDGES

        tensors.displacement_bwd[15, 0, 1] = 1.5
        tensors.displacement_bwd[15 + NUM_EDGES, 0, 1] = 2.5
        output = tensors.output()
        assert output.backward_displacement(15, Cell(0, 1)) == (2.5, 1.5)

    def test_out_of_range_cell_is_fatal(self, tensors):
        from pose import Cell, JointName

        output = tensors.output()
        with pytest.raises(IndexError):
            output.confidence(JointName.NOSE, Cell(33, 0))
        with pytest.raises(IndexError):
            output.confidence(JointName.NOSE, Cell(-1, 0))

    def test_out_of_range_edge_is_fatal(self, tensors):
        from pose import Cell

        output = tensors.output()
        with pytest.raises(IndexError):
            output.forward_displacement(16, Cell(0, 0))

    def test_missing_channels_are_fatal(self, tensors):
        """A heatmap with too few channels fails on the first out-of-range read."""
        from pose import Cell, JointName, PoseNetOutput

        output = PoseNetOutput(
            tensors.heatmap[:5], tensors.offsets, tensors.displacement_fwd, tensors.displacement_bwd
        )
        with pytest.raises(IndexError):
            output.confidence(JointName.RIGHT_ANKLE, Cell(0, 0))

    def test_tensors_are_read_only(self, tensors):
        output = tensors.output()
        with pytest.raises(ValueError):
            output.heatmap[0, 0, 0] = 1.0

    def test_source_arrays_are_copied(self, tensors):
        from pose import Cell, JointName

        output = tensors.output()
        tensors.heatmap[JointName.NOSE, 0, 0] = 0.5
        assert output.confidence(JointName.NOSE, Cell(0, 0)) == 0.0

    def test_non_3d_tensor_rejected(self, tensors):
        from pose import PoseNetOutput

        with pytest.raises(ValueError):
            PoseNetOutput(
                np.zeros((17, 33)), tensors.offsets, tensors.displacement_fwd, tensors.displacement_bwd
            )


class TestFromPrediction:
    """Building from named model outputs."""

    def test_from_prediction(self, tensors):
        from pose import PoseNetOutput

        prediction = {
            "heatmap": tensors.heatmap,
            "offsets": tensors.offsets,
            "displacementFwd": tensors.displacement_fwd,
            "displacementBwd": tensors.displacement_bwd,
        }
        output = PoseNetOutput.from_prediction(prediction, model_input_size=(513, 513), output_stride=16)
        assert output.height == 33
        assert output.displacement_fwd.shape == (32, 33, 33)

    def test_missing_feature(self, tensors):
        from pose import PoseNetOutput

        prediction = {
            "heatmap": tensors.heatmap,
            "offsets": tensors.offsets,
            "displacementFwd": tensors.displacement_fwd,
        }
        with pytest.raises(KeyError):
            PoseNetOutput.from_prediction(prediction)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
