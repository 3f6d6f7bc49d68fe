import math
from dataclasses import dataclass, field

MAX_POINT_COUNT = 101
DEFAULT_VOLTAGE_TOLERANCE = 0.1


@dataclass
class DataPoint:
    percent: int
    rpm: float
    torque: float = 0.0

    def __post_init__(self):
        if self.percent < 0:
            raise ValueError(f"Percent cannot be negative: {self.percent}")
        if self.rpm < 0:
            raise ValueError(f"RPM cannot be negative: {self.rpm}")

    @property
    def display_rpm(self) -> int:
        return int(round(self.rpm))


@dataclass(eq=False)
class Curve:
    """A named torque curve. Compared by identity, never by value."""

    name: str
    locked: bool = False
    visible: bool = True
    notes: str = ""
    points: list[DataPoint] = field(default_factory=list)

    def __post_init__(self):
        self._check_name(self.name)

    @staticmethod
    def _check_name(name):
        if not isinstance(name, str) or not name.strip():
            raise ValueError("Curve name cannot be empty")

    def rename(self, new_name: str):
        self._check_name(new_name)
        self.name = new_name

    def initialize_data(self, max_rpm: float, default_torque: float = 0.0):
        if max_rpm < 0:
            raise ValueError(f"max_rpm cannot be negative: {max_rpm}")
        self.points = [
            DataPoint(percent, percent / 100.0 * max_rpm, default_torque)
            for percent in range(MAX_POINT_COUNT)
        ]

    @property
    def point_count(self) -> int:
        return len(self.points)

    @property
    def percents(self) -> list[int]:
        return [p.percent for p in self.points]

    @property
    def rpms(self) -> list[float]:
        return [p.rpm for p in self.points]

    @property
    def torques(self) -> list[float]:
        return [p.torque for p in self.points]

    def validate_data_integrity(self) -> bool:
        if len(self.points) > MAX_POINT_COUNT:
            return False
        previous = -1
        for point in self.points:
            if point.percent < 0 or point.percent <= previous:
                return False
            previous = point.percent
        return True

    def get_point_by_percent(self, percent: int) -> DataPoint:
        if percent < 0:
            raise ValueError(f"Percent cannot be negative: {percent}")
        if (
            len(self.points) == MAX_POINT_COUNT
            and percent < MAX_POINT_COUNT
            and self.points[percent].percent == percent
        ):
            return self.points[percent]
        for point in self.points:
            if point.percent == percent:
                return point
        raise KeyError(f"No data point exists for {percent}%")


@dataclass(eq=False)
class Voltage:
    value: float
    power: float = 0.0
    max_speed: float = 0.0
    rated_speed: float = 0.0
    rated_continuous_torque: float = 0.0
    rated_peak_torque: float = 0.0
    continuous_amperage: float = 0.0
    peak_amperage: float = 0.0
    curves: list[Curve] = field(default_factory=list)

    @property
    def display_name(self) -> str:
        text = f"{self.value:.2f}".rstrip("0").rstrip(".")
        return f"{text} V"

    @property
    def point_count(self) -> int:
        if not self.curves:
            return 0
        return self.curves[0].point_count

    def get_series_by_name(self, name: str) -> Curve | None:
        for curve in self.curves:
            if curve.name == name:
                return curve
        return None

    def add_series(self, name: str, initialize_torque: float = 0.0) -> Curve:
        if self.get_series_by_name(name) is not None:
            raise ValueError(f"A curve with the name '{name}' already exists")
        curve = Curve(name)
        curve.initialize_data(self.max_speed, initialize_torque)
        self.curves.append(curve)
        return curve

    def remove_series(self, name: str) -> bool:
        curve = self.get_series_by_name(name)
        if curve is None:
            return False
        self.curves.remove(curve)
        return True

    def validate_axis_alignment(self) -> bool:
        if not self.curves:
            return True
        reference = self.curves[0]
        for curve in self.curves[1:]:
            if curve.point_count != reference.point_count:
                return False
            for ref, point in zip(reference.points, curve.points):
                if ref.percent != point.percent:
                    return False
                if not math.isclose(ref.rpm, point.rpm, rel_tol=0.0, abs_tol=1e-9):
                    return False
        return True


@dataclass(eq=False)
class Drive:
    name: str
    part_number: str = ""
    manufacturer: str = ""
    voltages: list[Voltage] = field(default_factory=list)

    def get_voltage(self, value: float, tolerance: float = DEFAULT_VOLTAGE_TOLERANCE) -> Voltage | None:
        for voltage in self.voltages:
            if abs(voltage.value - value) < tolerance:
                return voltage
        return None

    def add_voltage(self, value: float) -> Voltage:
        if self.get_voltage(value) is not None:
            raise ValueError(f"A voltage configuration for {value}V already exists")
        voltage = Voltage(value)
        self.voltages.append(voltage)
        return voltage


@dataclass(eq=False)
class ServoMotor:
    motor_name: str = ""
    manufacturer: str = ""
    part_number: str = ""
    power: float = 0.0
    max_speed: float = 0.0
    rated_speed: float = 0.0
    rated_continuous_torque: float = 0.0
    rated_peak_torque: float = 0.0
    weight: float = 0.0
    rotor_inertia: float = 0.0
    feedback_ppr: int = 0
    has_brake: bool = False
    brake_torque: float = 0.0
    drives: list[Drive] = field(default_factory=list)

    @property
    def drive_names(self) -> list[str]:
        return [d.name for d in self.drives]

    def get_drive_by_name(self, name: str) -> Drive | None:
        for drive in self.drives:
            if drive.name == name:
                return drive
        return None

    def add_drive(self, name: str) -> Drive:
        if self.get_drive_by_name(name) is not None:
            raise ValueError(f"A drive named '{name}' already exists")
        drive = Drive(name)
        self.drives.append(drive)
        return drive

    def remove_drive(self, name: str) -> bool:
        drive = self.get_drive_by_name(name)
        if drive is None:
            return False
        self.drives.remove(drive)
        return True


def generate_unique_name(existing, base: str) -> str:
    taken = set(existing)
    if base not in taken:
        return base
    n = 2
    while f"{base} {n}" in taken:
        n += 1
    return f"{base} {n}"
