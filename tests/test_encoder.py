from eaglectl.encoder import Encoder


def test_update_counts_up_and_down():
    enc = Encoder()
    for direction in (1, 1, 1, -1):
        enc.update(direction)
    assert enc.count == 2


def test_reversed_counts_opposite():
    plain = Encoder()
    rev = Encoder(reversed=True)
    for _ in range(3):
        plain.update(1)
        rev.update(1)
    assert rev.count == -plain.count


def test_speed_not_updated_before_period():
    enc = Encoder()
    enc.update(1)
    enc.process(9)
    assert enc.speed == 0
    assert enc.last_time == 0


def test_speed_after_period():
    enc = Encoder()
    for _ in range(5):
        enc.update(1)
    enc.process(10)
    assert enc.speed == 500
    assert enc.last_count == 5
    assert enc.last_time == 10


def test_reversed_speed_matches_plain_speed():
    plain = Encoder()
    rev = Encoder(reversed=True)
    for _ in range(4):
        plain.update(1)
        rev.update(1)
    plain.process(20)
    rev.process(20)
    assert rev.speed == plain.speed
    assert plain.speed > 0


def test_speed_drops_to_zero_when_still():
    enc = Encoder()
    enc.update(1)
    enc.process(10)
    enc.process(20)
    assert enc.speed == 0


def test_time_going_backwards_gives_zero_speed():
    enc = Encoder()
    enc.process(100)
    enc.update(1)
    enc.process(50)
    assert enc.speed == 0
    assert enc.last_time == 50


def test_count_can_be_set():
    enc = Encoder()
    enc.count = -10
    enc.update(1)
    assert enc.count == -9