"""First-person fly camera producing the projection x view matrix."""
from __future__ import annotations

import math
from dataclasses import dataclass, field

import numpy as np

MAX_PITCH = math.pi / 2 - 0.1
MOUSE_SENSITIVITY = 0.001
FOV_Y = math.radians(90.0)
NEAR = 0.01
FAR = 10000.0


def _normalize(v: np.ndarray) -> np.ndarray:
    n = float(np.linalg.norm(v))
    if n == 0.0:
        return v
    return v / n


def perspective(fov_y: float, aspect: float, near: float, far: float) -> np.ndarray:
    """OpenGL-style perspective projection (clip z in [-1, 1])."""
    f = 1.0 / math.tan(float(fov_y) / 2.0)
    nf = 1.0 / (float(near) - float(far))
    m = np.zeros((4, 4), dtype=np.float64)
    m[0, 0] = f / float(aspect)
    m[1, 1] = f
    m[2, 2] = (float(far) + float(near)) * nf
    m[2, 3] = 2.0 * float(far) * float(near) * nf
    m[3, 2] = -1.0
    return m


def look_at(eye: np.ndarray, target: np.ndarray, up: np.ndarray) -> np.ndarray:
    eye = np.asarray(eye, dtype=np.float64)
    forward = _normalize(eye - np.asarray(target, dtype=np.float64))
    side = _normalize(np.cross(np.asarray(up, dtype=np.float64), forward))
    true_up = np.cross(forward, side)

    m = np.eye(4, dtype=np.float64)
    m[0, :3] = side
    m[1, :3] = true_up
    m[2, :3] = forward
    m[:3, 3] = -m[:3, :3] @ eye
    return m


@dataclass
class Camera:
    position: np.ndarray = field(default_factory=lambda: np.zeros(3))
    direction: np.ndarray = field(default_factory=lambda: np.array([0.0, 0.0, 1.0]))
    right: np.ndarray = field(default_factory=lambda: np.array([-1.0, 0.0, 0.0]))
    up: np.ndarray = field(default_factory=lambda: np.array([0.0, 1.0, 0.0]))
    yaw: float = 0.0
    pitch: float = 0.0
    speed: float = 1.0
    focused: bool = False
    pressed: set[str] = field(default_factory=set)

    def key_down(self, code: str) -> None:
        self.pressed.add(code)

    def key_up(self, code: str) -> None:
        self.pressed.discard(code)

    def mouse_move(self, dx: float, dy: float) -> None:
        if not self.focused:
            return
        self.yaw -= float(dx) * MOUSE_SENSITIVITY
        self.pitch -= float(dy) * MOUSE_SENSITIVITY
        self.pitch = max(-MAX_PITCH, min(MAX_PITCH, self.pitch))

    def _update_direction(self) -> None:
        cp = math.cos(self.pitch)
        self.direction = _normalize(
            np.array([cp * math.sin(self.yaw), math.sin(self.pitch), cp * math.cos(self.yaw)])
        )
        self.right = _normalize(np.cross(self.direction, self.up))

    def _update_position(self) -> None:
        flat_dir = np.array([self.direction[0], 0.0, self.direction[2]])
        flat_right = np.array([self.right[0], 0.0, self.right[2]])

        motion = np.zeros(3)
        if "KeyW" in self.pressed:
            motion += flat_dir
        if "KeyS" in self.pressed:
            motion -= flat_dir
        if "KeyD" in self.pressed:
            motion += flat_right
        if "KeyA" in self.pressed:
            motion -= flat_right
        if "Space" in self.pressed:
            motion += self.up
        if "ShiftLeft" in self.pressed:
            motion -= self.up

        if float(np.linalg.norm(motion)) == 0.0:
            return
        self.position = self.position + _normalize(motion) * float(self.speed)

    def update(self) -> None:
        if not self.focused:
            return
        self._update_direction()
        self._update_position()

    def view_matrix(self) -> np.ndarray:
        return look_at(self.position, self.position + self.direction, self.up)

    def mvp(self, width: int, height: int) -> np.ndarray:
        aspect = float(width) / max(float(height), 1.0)
        return perspective(FOV_Y, aspect, NEAR, FAR) @ self.view_matrix()
