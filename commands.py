import logging
from dataclasses import dataclass
from enum import Enum

from motor_model import Curve, Drive, ServoMotor, Voltage

logger = logging.getLogger(__name__)


class UndoableCommand:
    """A reversible mutation. Subclasses capture their own before/after values."""

    description = "Edit"

    def execute(self):
        raise NotImplementedError

    def undo(self):
        raise NotImplementedError


def _check_index(curve: Curve, index: int):
    if index < 0 or index >= len(curve.points):
        raise IndexError(
            f"Point index {index} is out of range for curve '{curve.name}' "
            f"({len(curve.points)} points)"
        )


class EditPointCommand(UndoableCommand):
    def __init__(self, curve: Curve, index: int, new_rpm: float, new_torque: float):
        if curve is None:
            raise TypeError("curve is required")
        self.curve = curve
        self.index = index
        self.new_rpm = new_rpm
        self.new_torque = new_torque
        self._old_rpm: float | None = None
        self._old_torque: float | None = None

    @property
    def description(self):
        return f"Edit point {self.index} in series '{self.curve.name}'"

    def execute(self):
        _check_index(self.curve, self.index)
        point = self.curve.points[self.index]
        self._old_rpm = point.rpm
        self._old_torque = point.torque
        point.rpm = self.new_rpm
        point.torque = self.new_torque

    def undo(self):
        _check_index(self.curve, self.index)
        point = self.curve.points[self.index]
        point.rpm = self._old_rpm
        point.torque = self._old_torque


@dataclass(frozen=True)
class TorqueTarget:
    curve: Curve
    index: int
    old_torque: float
    new_torque: float


class OverrideTorqueCellsCommand(UndoableCommand):
    """Writes many torque cells as one undo step.

    Targets whose index has gone out of range are skipped, not raised.
    """

    description = "Override torque values for selected cells"

    def __init__(self, targets):
        if targets is None:
            raise TypeError("targets is required")
        self.targets: tuple[TorqueTarget, ...] = tuple(targets)

    def _apply(self, use_new: bool):
        for target in self.targets:
            points = target.curve.points
            if target.index < 0 or target.index >= len(points):
                logger.debug(
                    "Skipping out-of-range target %s[%d]", target.curve.name, target.index
                )
                continue
            points[target.index].torque = (
                target.new_torque if use_new else target.old_torque
            )

    def execute(self):
        self._apply(use_new=True)

    def undo(self):
        self._apply(use_new=False)


class EditSeriesCommand(UndoableCommand):
    def __init__(self, curve: Curve, new_name: str | None = None, new_locked: bool | None = None):
        if curve is None:
            raise TypeError("curve is required")
        self.curve = curve
        self.new_name = new_name
        self.new_locked = new_locked
        self._old_name: str | None = None
        self._old_locked = curve.locked

    @property
    def description(self):
        return f"Edit series '{self.curve.name}'"

    def execute(self):
        old_name = self.curve.name
        old_locked = self.curve.locked
        if self.new_name is not None:
            self.curve.rename(self.new_name)
        if self.new_locked is not None:
            self.curve.locked = bool(self.new_locked)
        self._old_name = old_name
        self._old_locked = old_locked

    def undo(self):
        if self.new_name is not None and self._old_name is not None:
            self.curve.rename(self._old_name)
        self.curve.locked = self._old_locked


class PropertyField(Enum):
    MOTOR_NAME = "motor_name"
    MOTOR_MANUFACTURER = "motor_manufacturer"
    MOTOR_PART_NUMBER = "motor_part_number"
    MOTOR_POWER = "motor_power"
    MOTOR_MAX_SPEED = "motor_max_speed"
    MOTOR_RATED_SPEED = "motor_rated_speed"
    MOTOR_RATED_CONTINUOUS_TORQUE = "motor_rated_continuous_torque"
    MOTOR_RATED_PEAK_TORQUE = "motor_rated_peak_torque"
    MOTOR_WEIGHT = "motor_weight"
    MOTOR_ROTOR_INERTIA = "motor_rotor_inertia"
    MOTOR_FEEDBACK_PPR = "motor_feedback_ppr"
    MOTOR_HAS_BRAKE = "motor_has_brake"
    MOTOR_BRAKE_TORQUE = "motor_brake_torque"
    DRIVE_NAME = "drive_name"
    DRIVE_PART_NUMBER = "drive_part_number"
    DRIVE_MANUFACTURER = "drive_manufacturer"
    VOLTAGE_VALUE = "voltage_value"
    VOLTAGE_POWER = "voltage_power"
    VOLTAGE_MAX_SPEED = "voltage_max_speed"
    VOLTAGE_RATED_SPEED = "voltage_rated_speed"
    VOLTAGE_RATED_CONTINUOUS_TORQUE = "voltage_rated_continuous_torque"
    VOLTAGE_RATED_PEAK_TORQUE = "voltage_rated_peak_torque"
    VOLTAGE_CONTINUOUS_AMPERAGE = "voltage_continuous_amperage"
    VOLTAGE_PEAK_AMPERAGE = "voltage_peak_amperage"


# field -> (owner type, attribute)
PROPERTY_SETTERS: dict[PropertyField, tuple[type, str]] = {
    PropertyField.MOTOR_NAME: (ServoMotor, "motor_name"),
    PropertyField.MOTOR_MANUFACTURER: (ServoMotor, "manufacturer"),
    PropertyField.MOTOR_PART_NUMBER: (ServoMotor, "part_number"),
    PropertyField.MOTOR_POWER: (ServoMotor, "power"),
    PropertyField.MOTOR_MAX_SPEED: (ServoMotor, "max_speed"),
    PropertyField.MOTOR_RATED_SPEED: (ServoMotor, "rated_speed"),
    PropertyField.MOTOR_RATED_CONTINUOUS_TORQUE: (ServoMotor, "rated_continuous_torque"),
    PropertyField.MOTOR_RATED_PEAK_TORQUE: (ServoMotor, "rated_peak_torque"),
    PropertyField.MOTOR_WEIGHT: (ServoMotor, "weight"),
    PropertyField.MOTOR_ROTOR_INERTIA: (ServoMotor, "rotor_inertia"),
    PropertyField.MOTOR_FEEDBACK_PPR: (ServoMotor, "feedback_ppr"),
    PropertyField.MOTOR_HAS_BRAKE: (ServoMotor, "has_brake"),
    PropertyField.MOTOR_BRAKE_TORQUE: (ServoMotor, "brake_torque"),
    PropertyField.DRIVE_NAME: (Drive, "name"),
    PropertyField.DRIVE_PART_NUMBER: (Drive, "part_number"),
    PropertyField.DRIVE_MANUFACTURER: (Drive, "manufacturer"),
    PropertyField.VOLTAGE_VALUE: (Voltage, "value"),
    PropertyField.VOLTAGE_POWER: (Voltage, "power"),
    PropertyField.VOLTAGE_MAX_SPEED: (Voltage, "max_speed"),
    PropertyField.VOLTAGE_RATED_SPEED: (Voltage, "rated_speed"),
    PropertyField.VOLTAGE_RATED_CONTINUOUS_TORQUE: (Voltage, "rated_continuous_torque"),
    PropertyField.VOLTAGE_RATED_PEAK_TORQUE: (Voltage, "rated_peak_torque"),
    PropertyField.VOLTAGE_CONTINUOUS_AMPERAGE: (Voltage, "continuous_amperage"),
    PropertyField.VOLTAGE_PEAK_AMPERAGE: (Voltage, "peak_amperage"),
}


class EditPropertyCommand(UndoableCommand):
    """Sets one scalar field on a motor, drive or voltage."""

    def __init__(self, target, field: PropertyField, old_value, new_value):
        if target is None:
            raise TypeError("target is required")
        owner_type, attr = PROPERTY_SETTERS[field]
        if not isinstance(target, owner_type):
            raise ValueError(
                f"{field.name} applies to {owner_type.__name__}, "
                f"not {type(target).__name__}"
            )
        self.target = target
        self.field = field
        self.attr = attr
        self.old_value = old_value
        self.new_value = new_value

    @property
    def description(self):
        owner = PROPERTY_SETTERS[self.field][0].__name__.lower()
        return f"Edit {owner} property '{self.attr}'"

    def execute(self):
        setattr(self.target, self.attr, self.new_value)

    def undo(self):
        setattr(self.target, self.attr, self.old_value)
