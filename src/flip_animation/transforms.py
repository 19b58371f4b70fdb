"""
transforms.py

Homogeneous 4x4 transforms for the two faces of a flipping panel.

The panel lies in the z = 0 plane of its own frame, centred on the origin.
Each face transform is a shallow perspective term applied on top of a
rotation about the X axis (horizontal flips) or the Y axis (vertical flips):

    M = P @ R(angle)

where P is the identity with a small projective entry at row 3, column 2, so
that points moving toward negative z appear to recede instead of flattening.
Matrices use the column-vector convention (x' = M @ x).
"""

from __future__ import annotations

from typing import Tuple

import numpy as np
from scipy.spatial.transform import Rotation

from .state import Axis, BackFaceMode, DEFAULT_PERSPECTIVE, coerce_enum

# Euler axis letter for each flip axis
_EULER_AXIS = {
    Axis.HORIZONTAL: 'x',
    Axis.VERTICAL: 'y',
}


def perspective_matrix(perspective: float = DEFAULT_PERSPECTIVE) -> np.ndarray:
    """Identity with the projective term at [3, 2]."""
    m = np.eye(4)
    m[3, 2] = float(perspective)
    return m


def rotation_matrix(angle: float, axis) -> np.ndarray:
    """
    Homogeneous rotation about the X (horizontal) or Y (vertical) axis.

    Inputs:
    - angle: rotation angle [rad].
    - axis: Axis member or its name.

    Outputs:
    - (4, 4) ndarray.
    """
    axis = coerce_enum(Axis, axis, "axis")
    m = np.eye(4)
    m[:3, :3] = Rotation.from_euler(_EULER_AXIS[axis], float(angle)).as_matrix()
    return m


def build_transforms(angle: float,
                     axis,
                     perspective: float = DEFAULT_PERSPECTIVE,
                     back_face=BackFaceMode.TRACKING) -> Tuple[np.ndarray, np.ndarray]:
    """
    Compute the current-face and opposite-face transforms.

    Parameters
    ----------
    angle : float
        Signed rotation angle of the panel (rad).
    axis : Axis or str
        Rotation plane.
    perspective : float
        Projective entry applied before rotating (default 0.001).
    back_face : BackFaceMode or str
        How the opposite transform is produced.

    Returns
    -------
    current : ndarray
        (4, 4) transform for the face that started this flip facing the viewer.
    opposite : ndarray
        (4, 4) transform for the other face.

    Notes
    -----
    With ``BackFaceMode.TRACKING`` the opposite face is the same rigid card
    seen from behind: it is rotated by ``angle + pi`` about the same axis, so
    both faces share one plane with opposite normals at every instant.

    With ``BackFaceMode.PINNED`` the opposite transform is a constant half
    turn without perspective. It is meant to be nested inside the current
    transform by the host (composite = current @ opposite), which yields the
    same back-to-back placement as TRACKING.
    """
    axis = coerce_enum(Axis, axis, "axis")
    back_face = coerce_enum(BackFaceMode, back_face, "back_face")

    projection = perspective_matrix(perspective)
    current = projection @ rotation_matrix(angle, axis)

    if back_face is BackFaceMode.TRACKING:
        opposite = projection @ rotation_matrix(angle + np.pi, axis)
    else:
        opposite = rotation_matrix(np.pi, axis)

    return current, opposite


def apply_transform(matrix: np.ndarray, points: np.ndarray) -> np.ndarray:
    """
    Map (N, 3) panel points through a 4x4 transform.

    The homogeneous coordinate is divided out, so the result includes the
    perspective foreshortening.
    """
    pts = np.atleast_2d(np.asarray(points, dtype=float))
    if pts.shape[1] != 3:
        raise ValueError(f"points must have shape (N, 3), got {pts.shape}")

    homogeneous = np.hstack([pts, np.ones((pts.shape[0], 1))])
    mapped = homogeneous @ np.asarray(matrix, dtype=float).T
    w = mapped[:, 3:4]
    return mapped[:, :3] / w


def face_normal(matrix: np.ndarray) -> np.ndarray:
    """Unit normal of the transformed z = 0 plane (the rotation part only)."""
    n = np.asarray(matrix, dtype=float)[:3, :3] @ np.array([0.0, 0.0, 1.0])
    return n / np.linalg.norm(n)
