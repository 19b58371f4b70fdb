"""
Unit tests for the face visibility selector.
"""

import numpy as np
import pytest
from flip_animation import is_front_visible

EPS = 1e-9


class TestFrontVisibility:
    """Tests for is_front_visible()"""

    def test_rest_is_front(self):
        """No rotation shows the front"""
        assert is_front_visible(0.0) is True

    def test_half_turn_is_back(self):
        """A half turn in either direction shows the back"""
        assert is_front_visible(np.pi) is False
        assert is_front_visible(-np.pi) is False

    def test_full_turn_is_front(self):
        """A full turn shows the front again"""
        assert is_front_visible(2 * np.pi) is True
        assert is_front_visible(-2 * np.pi) is True

    def test_quarter_turn_boundary_inclusive(self):
        """Exactly pi/2 is front-visible, just past it is not"""
        assert is_front_visible(np.pi / 2) is True
        assert is_front_visible(np.pi / 2 + EPS) is False

    def test_three_quarter_turn_boundary_inclusive(self):
        """Exactly 3pi/2 is front-visible, just before it is not"""
        assert is_front_visible(3 * np.pi / 2) is True
        assert is_front_visible(3 * np.pi / 2 - EPS) is False

    @pytest.mark.parametrize("angle", [0.3, np.pi / 2, 2.0, np.pi, 4.0, 3 * np.pi / 2, 6.0])
    def test_sign_symmetric(self, angle):
        """Only the magnitude of the angle matters"""
        assert is_front_visible(angle) == is_front_visible(-angle)

    def test_scenario_fast_phase_angle(self):
        """0.375 of a half turn is still front-visible"""
        assert is_front_visible(-0.375 * np.pi) is True

    def test_array_input(self):
        """Arrays are classified elementwise"""
        angles = np.array([0.0, np.pi / 2, np.pi, 3 * np.pi / 2, 2 * np.pi])
        visible = is_front_visible(angles)
        assert visible.dtype == bool
        assert visible.tolist() == [True, True, False, True, True]
