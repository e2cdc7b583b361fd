"""Environment readings and the step tables used to dial them in."""

from dataclasses import dataclass
from typing import Sequence

# Slider steps; -273 sits at the far left
TEMP_STEPS = [
    -273,
    -45, -40, -35,
    -30, -25, -20, -15, -10, -5,
    0,
    5, 10, 15, 20, 25, 30, 35, 40, 45,
    999,
]

HUM_STEPS = [
    0, 5, 10, 15, 20, 25, 30, 35, 40, 45,
    50, 55, 60, 65, 70, 75, 80, 85, 90, 95, 99, 100,
]

LIGHT_STEPS = [0, 50, 100]


def snap_to_step(value: float, steps: Sequence[int]) -> int:
    """Nearest step to value; ties go to the lower step."""
    return min(steps, key=lambda step: (abs(step - value), step))


@dataclass(frozen=True)
class EnvironmentReading:
    """
    One temperature/humidity/light reading.

    At humidity 100 the light value is read as water depth.
    """

    temperature: int = 0
    humidity: int = 50
    light: int = 50

    @property
    def is_sea(self) -> bool:
        return self.humidity == 100

    @property
    def is_neutral(self) -> bool:
        return self.temperature == 0 and self.humidity == 50

    @classmethod
    def from_steps(cls, temp_index: int, hum_index: int, light: int = 50) -> "EnvironmentReading":
        """Build a reading from slider indices, clamping them into range."""
        temp_index = max(0, min(len(TEMP_STEPS) - 1, int(temp_index)))
        hum_index = max(0, min(len(HUM_STEPS) - 1, int(hum_index)))
        return cls(
            temperature=TEMP_STEPS[temp_index],
            humidity=HUM_STEPS[hum_index],
            light=snap_to_step(light, LIGHT_STEPS),
        )


NEUTRAL_READING = EnvironmentReading(temperature=0, humidity=50, light=50)
