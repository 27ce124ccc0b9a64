import numpy as np

from swing_scoring.exceptions import ValidationError

NUM_LANDMARKS = 33

# MediaPipe Pose indices
LEFT_SHOULDER, RIGHT_SHOULDER = 11, 12
LEFT_WRIST, RIGHT_WRIST = 15, 16
LEFT_HIP, RIGHT_HIP = 23, 24
LEFT_KNEE, RIGHT_KNEE = 25, 26
LEFT_ANKLE, RIGHT_ANKLE = 27, 28
LEFT_FOOT_INDEX, RIGHT_FOOT_INDEX = 31, 32


def landmarks_array(frame):
    """
    frame: 33 landmarks, each [x, y] or [x, y, z(, visibility)] in normalized coords.
    Returns a (33, 2) float array of x/y, or None for a dropped frame.
    """
    if frame is None:
        return None
    try:
        pts = np.asarray(frame, dtype=float)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"Pose frame is not numeric: {e}") from e

    if pts.ndim != 2 or pts.shape[0] < NUM_LANDMARKS or pts.shape[1] < 2:
        raise ValidationError(
            f"Pose frame must have {NUM_LANDMARKS} landmarks with at least x/y, got shape {pts.shape}"
        )
    return pts[:NUM_LANDMARKS, :2]


def midpoint(a, b):
    return (a + b) / 2.0


def segment_rotation(left, right):
    """Angle of the left->right line in degrees (image coords)."""
    return float(np.degrees(np.arctan2(right[1] - left[1], right[0] - left[0])))


def angle(a, b, c):
    """Interior angle at b in degrees."""
    ba = a - b
    bc = c - b
    ba = ba / (np.linalg.norm(ba) + 1e-8)
    bc = bc / (np.linalg.norm(bc) + 1e-8)
    cosine_angle = np.clip(np.dot(ba, bc), -1.0, 1.0)
    return float(np.degrees(np.arccos(cosine_angle)))
