from motor_model import ServoMotor


class DefaultMotorInitializer:
    def create(self) -> ServoMotor:
        motor = ServoMotor(motor_name="New Motor", max_speed=5000.0)
        drive = motor.add_drive("Drive 1")
        for value, peak, continuous in ((48.0, 12.0, 6.0), (24.0, 8.0, 4.0)):
            voltage = drive.add_voltage(value)
            voltage.max_speed = motor.max_speed * value / 48.0
            voltage.add_series("Peak", peak)
            voltage.add_series("Continuous", continuous)
        return motor
