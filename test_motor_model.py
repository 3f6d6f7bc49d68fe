import pytest

from motor_model import (
    MAX_POINT_COUNT,
    Curve,
    DataPoint,
    Drive,
    ServoMotor,
    Voltage,
    generate_unique_name,
)


def test_data_point_rejects_negative_values():
    with pytest.raises(ValueError):
        DataPoint(-1, 0.0)
    with pytest.raises(ValueError):
        DataPoint(0, -5.0)


def test_display_rpm_rounds():
    assert DataPoint(10, 499.6).display_rpm == 500
    assert DataPoint(10, 499.4).display_rpm == 499


def test_initialize_data_builds_full_percent_axis():
    curve = Curve("Peak")
    curve.initialize_data(5000.0, 2.5)

    assert curve.point_count == MAX_POINT_COUNT
    assert curve.percents == list(range(101))
    assert curve.rpms[0] == 0.0
    assert curve.rpms[50] == pytest.approx(2500.0)
    assert curve.rpms[100] == pytest.approx(5000.0)
    assert set(curve.torques) == {2.5}
    assert curve.validate_data_integrity()


def test_curve_name_cannot_be_blank():
    with pytest.raises(ValueError):
        Curve("  ")
    curve = Curve("Peak")
    with pytest.raises(ValueError):
        curve.rename("")
    assert curve.name == "Peak"


def test_curves_compare_by_identity():
    a = Curve("Peak")
    b = Curve("Peak")
    assert a != b
    assert len({a, b}) == 2


def test_get_point_by_percent():
    curve = Curve("Peak")
    curve.initialize_data(1000.0)
    assert curve.get_point_by_percent(42).percent == 42
    with pytest.raises(KeyError):
        curve.get_point_by_percent(500)
    with pytest.raises(ValueError):
        curve.get_point_by_percent(-1)


def test_validate_data_integrity_flags_unordered_percents():
    curve = Curve("Peak", points=[DataPoint(0, 0.0), DataPoint(5, 10.0), DataPoint(3, 20.0)])
    assert not curve.validate_data_integrity()


def test_voltage_series_management():
    voltage = Voltage(48.0, max_speed=3000.0)
    peak = voltage.add_series("Peak", 10.0)

    assert voltage.point_count == 101
    assert voltage.get_series_by_name("Peak") is peak
    with pytest.raises(ValueError):
        voltage.add_series("Peak")

    voltage.add_series("Continuous", 5.0)
    assert voltage.validate_axis_alignment()
    assert voltage.remove_series("Peak")
    assert not voltage.remove_series("Peak")
    assert [c.name for c in voltage.curves] == ["Continuous"]


def test_voltage_alignment_detects_rpm_mismatch():
    voltage = Voltage(48.0, max_speed=3000.0)
    voltage.add_series("Peak")
    other = voltage.add_series("Continuous")
    other.points[10].rpm += 1.0
    assert not voltage.validate_axis_alignment()


def test_voltage_display_name():
    assert Voltage(48.0).display_name == "48 V"
    assert Voltage(220.5).display_name == "220.5 V"


def test_drive_voltage_lookup_uses_tolerance():
    drive = Drive("Drive 1")
    v48 = drive.add_voltage(48.0)
    assert drive.get_voltage(48.05) is v48
    assert drive.get_voltage(48.2) is None
    with pytest.raises(ValueError):
        drive.add_voltage(48.0)


def test_motor_drive_management():
    motor = ServoMotor(motor_name="M1")
    drive = motor.add_drive("A")
    assert motor.get_drive_by_name("A") is drive
    assert motor.drive_names == ["A"]
    with pytest.raises(ValueError):
        motor.add_drive("A")
    assert motor.remove_drive("A")
    assert motor.drives == []


@pytest.mark.parametrize(
    "existing, expected",
    [
        ([], "Series"),
        (["Series"], "Series 2"),
        (["Series", "Series 2"], "Series 3"),
    ],
)
def test_generate_unique_name(existing, expected):
    assert generate_unique_name(existing, "Series") == expected
