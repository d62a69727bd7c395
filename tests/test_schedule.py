import pytest

from ledsched.schedule import Schedule, parse_schedule

MESSAGE = "SCHED&b=08:00,0;09:00,100&r=10:30,50&OK"


@pytest.fixture
def blue():
    return parse_schedule(MESSAGE, "b")


def test_parse_builds_nodes_in_order(blue):
    assert [(n.hour, n.minute) for n in blue] == [(8, 0), (9, 0)]
    assert [n.pwm for n in blue] == [0, 255]
    assert {n.pin_number for n in blue} == {6}


def test_ramp_reaches_next_point(blue):
    assert blue[0].delta_pwm_per_minute == 0
    reached = blue[0].pwm + blue[1].delta_pwm_per_minute * 60
    assert reached == pytest.approx(blue[1].pwm, abs=0.01)


def test_white_channels_use_their_pins():
    data = "SCHED&wCold=06:00,10&wWarm=07:00,20&OK"
    cold = parse_schedule(data, "wCold")
    warm = parse_schedule(data, "wWarm")
    assert [(n.hour, n.pin_number) for n in cold] == [(6, 5)]
    assert [(n.hour, n.pin_number) for n in warm] == [(7, 3)]


def test_unknown_colour_gives_nothing():
    assert parse_schedule(MESSAGE, "green") == []


def test_unterminated_field_gives_nothing():
    assert parse_schedule("b=08:00,10", "b") == []


def test_pwm_is_clamped():
    nodes = parse_schedule("b=08:00,150;09:00,-5&", "b")
    assert [n.pwm for n in nodes] == [255, 0]


def test_parsing_stops_at_malformed_entry():
    nodes = parse_schedule("b=08:00,10;0900;10:00,20&", "b")
    assert len(nodes) == 1
    nodes = parse_schedule("b=08:00,10;0900,5;10:00,20&", "b")
    assert len(nodes) == 1


def test_update_mid_ramp_writes_once(blue):
    recorded = []
    schedule = Schedule(lambda pin, value: recorded.append((pin, value)))
    writes = schedule.update_pwm(8, 30, [blue, [], [], []])
    assert len(writes) == 1
    pin, value = writes[0]
    assert pin == 6 and 0 < value < 255
    assert recorded == writes
    assert blue[0].updated_pwm == value
    assert schedule.update_pwm(8, 30, [blue, [], [], []]) == []


def test_ramp_is_increasing(blue):
    schedule = Schedule()
    values = [schedule.update_pwm(8, m, [blue, None, None, None])[0][1] for m in (10, 20, 40, 50)]
    assert values == sorted(values)
    assert len(set(values)) == len(values)


def test_tail_holds_last_value_for_an_hour(blue):
    schedule = Schedule()
    assert schedule.update_pwm(9, 30, [blue, [], [], []]) == [(6, 255)]
    fresh = parse_schedule(MESSAGE, "b")
    assert schedule.update_pwm(10, 1, [fresh, [], [], []]) == []


def test_nothing_before_first_point(blue):
    assert Schedule().update_pwm(7, 0, [blue, [], [], []]) == []


def test_check_for_schedule_finds_active_segment(blue):
    schedule = Schedule()
    assert schedule.check_for_schedule(8, 15, [blue, [], [], []]) == [("b", blue[0], blue[1])]
    assert schedule.check_for_schedule(9, 15, [blue, [], [], []]) == []