from eaglectl.actuator import ActuatorError, ActuatorState
from eaglectl.core import Controller
from eaglectl.crc import crc8


def drain(uart):
    out = []
    while (byte := uart.transmit_byte()) is not None:
        out.append(byte)
    return bytes(out).decode("ascii")


def split_frame(frame):
    assert frame.startswith("MMNT44,")
    assert frame.endswith("\r\n")
    body = frame[: frame.rindex(",") + 1]
    parts = frame[:-2].split(",")
    return [int(p) for p in parts[1:-1]], int(parts[-1]), body


def send_request(controller, text):
    for byte in text.encode("ascii"):
        controller.uart.receive(byte)


def test_start_prints_banner_and_homes():
    controller = Controller()
    controller.start()
    text = drain(controller.uart)
    assert text.startswith("Start programu\n")
    assert "Wersja: v1.08\n" in text
    assert "Liczba silownikow: 3\n" in text
    assert "Zakres pracy: 505\n" in text
    assert all(a.state is ActuatorState.HOMING_RETURN for a in controller.actuators)


def test_on_frame_sets_doubled_targets():
    controller = Controller()
    controller.on_frame([10, 20, 30, 0])
    assert [a.target_pos for a in controller.actuators] == [20, 40, 60]


def test_on_frame_wrong_field_count_ignored():
    controller = Controller()
    controller.on_frame([10, 20, 0])
    controller.on_frame([])
    assert [a.target_pos for a in controller.actuators] == [0, 0, 0]


def test_on_frame_homing_flag():
    controller = Controller()
    controller.on_frame([10, 20, 30, 1])
    assert all(a.state is ActuatorState.HOMING_RETURN for a in controller.actuators)
    assert all(a.error_code is ActuatorError.OK_HOMING for a in controller.actuators)


def test_on_edge_respects_encoder_direction():
    controller = Controller()
    controller.on_edge(0, 1)
    controller.on_edge(1, 1)
    controller.on_edge(1, 1)
    assert controller.encoders[0].count == -1
    assert controller.encoders[1].count == 2


def test_status_frame_fields_and_crc():
    controller = Controller()
    controller.on_frame([10, 20, 30, 0])
    fields, crc, body = split_frame(controller.status_frame())
    assert fields == [0, 10, 0, 20, 0, 30, 0, 0, 0]
    assert crc == crc8(body.encode("ascii"))


def test_status_frame_reports_errors_and_negative_positions():
    controller = Controller()
    controller.start()
    controller.encoders[1].count = -3
    fields, _, _ = split_frame(controller.status_frame())
    assert fields[2] == -1
    assert fields[6:] == [int(ActuatorError.OK_HOMING)] * 3


def test_step_parses_request_and_reports():
    controller = Controller()
    send_request(controller, "MMNR33,10,20,30,0,0\n")
    frame = controller.step(0)
    fields, _, _ = split_frame(frame)
    assert fields[1::2][:3] == [10, 20, 30]
    assert drain(controller.uart) == frame


def test_step_with_valid_crc():
    controller = Controller()
    body = "MMNR33,1,2,3,0,"
    send_request(controller, f"{body}{crc8(body.encode('ascii'))}\r")
    controller.step(0)
    assert [a.target_pos for a in controller.actuators] == [2, 4, 6]


def test_step_with_bad_crc_ignored():
    controller = Controller()
    body = "MMNR33,1,2,3,0,"
    bad = (crc8(body.encode("ascii")) ^ 1) or 2
    send_request(controller, f"{body}{bad}\n")
    controller.step(0)
    assert [a.target_pos for a in controller.actuators] == [0, 0, 0]


def test_step_status_period():
    controller = Controller()
    assert controller.step(0) is not None
    assert controller.step(199) is None
    assert controller.step(200) is not None
    assert controller.step(201) is None