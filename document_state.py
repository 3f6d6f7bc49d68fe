from typing import Callable

from motor_model import Drive, ServoMotor, Voltage
from undo_stack import UndoStack


class DocumentState:
    def __init__(self, motor: ServoMotor, file_path=None, undo_stack: UndoStack | None = None):
        self.motor = motor
        self.file_path = file_path
        self.undo_stack = undo_stack if undo_stack is not None else UndoStack()

        self.active_drive: Drive | None = None
        self.active_voltage: Voltage | None = None
        self.listeners: list[Callable[[], None]] = []

        self._clean_checkpoint = self.undo_stack.undo_depth
        self._external_dirty = False

        self.select_first_voltage()

    # ---------- active voltage ----------
    def _set_active_pair(self, drive, voltage):
        changed = voltage is not self.active_voltage
        self.active_drive = drive
        self.active_voltage = voltage
        if changed:
            for listener in list(self.listeners):
                listener()

    def select_first_voltage(self) -> bool:
        for drive in self.motor.drives:
            if drive.voltages:
                self._set_active_pair(drive, drive.voltages[0])
                return True
        self._set_active_pair(None, None)
        return False

    def set_active(self, drive_name: str, voltage_value: float) -> bool:
        drive = self.motor.get_drive_by_name(drive_name)
        if drive is None:
            return False
        voltage = drive.get_voltage(voltage_value)
        if voltage is None:
            return False
        self._set_active_pair(drive, voltage)
        return True

    def all_voltages(self) -> list[tuple[Drive, Voltage]]:
        return [(d, v) for d in self.motor.drives for v in d.voltages]

    def switch_voltage(self, delta: int) -> Voltage | None:
        pairs = self.all_voltages()
        if not pairs:
            return None
        current = next(
            (i for i, (_, v) in enumerate(pairs) if v is self.active_voltage), 0
        )
        drive, voltage = pairs[(current + delta) % len(pairs)]
        self._set_active_pair(drive, voltage)
        return voltage

    def remove_active_voltage(self) -> bool:
        if self.active_drive is None or self.active_voltage is None:
            return False
        self.active_drive.voltages.remove(self.active_voltage)
        self._external_dirty = True
        self.select_first_voltage()
        return True

    # ---------- dirty tracking ----------
    def mark_clean_checkpoint(self):
        self._clean_checkpoint = self.undo_stack.undo_depth
        self._external_dirty = False

    def mark_dirty(self):
        self._external_dirty = True

    @property
    def clean_checkpoint(self) -> int:
        return self._clean_checkpoint

    @property
    def is_dirty(self) -> bool:
        return self._external_dirty or self.undo_stack.undo_depth != self._clean_checkpoint
