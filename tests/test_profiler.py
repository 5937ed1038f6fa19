from voxgen.profiler import ProfilerData


def test_first_sample_only_primes_clock():
    p = ProfilerData()
    p.update(1000.0)
    assert p.last_timestamp == 1000.0
    assert p.fps == 0.0
    assert p.frame_time == 0.0


def test_frame_time_and_fps():
    p = ProfilerData()
    p.update(1000.0)
    p.update(1020.0)
    assert p.frame_time == 20.0
    assert p.fps == 50.0
    assert p.last_timestamp == 1020.0


def test_zero_elapsed_does_not_divide():
    p = ProfilerData()
    p.update(5.0)
    p.update(5.0)
    assert p.frame_time == 0.0
    assert p.fps == 0.0
