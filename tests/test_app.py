import threading
from datetime import datetime, timedelta

import pytest

from cassebrique.app import (
    JobQueue,
    audio_bytes_to_write,
    main,
    next_display_size,
    random_seed_from_time,
)

BUFFER_SIZE = 44100 * 4


def _audio(running, play, write, size=BUFFER_SIZE):
    return audio_bytes_to_write(running, play, write, size, 4, 44100, 0.01666)


# Job queue

def test_jobs_run_in_order_and_receive_queue():
    seen = []
    done = threading.Event()

    def record(queue, data):
        seen.append((queue, data))
        if data == 4:
            done.set()

    with JobQueue() as queue:
        assert queue.closed is False
        for n in range(5):
            queue.add(record, n)
        assert done.wait(5)
    assert queue.closed is True
    assert [data for _, data in seen] == [0, 1, 2, 3, 4]
    assert all(q is queue for q, _ in seen)


def test_close_drains_pending_jobs():
    seen = []
    queue = JobQueue()
    for n in range(10):
        queue.add(lambda q, d: seen.append(d), n)
    queue.close()
    assert sorted(seen) == list(range(10))
    assert queue.closed is True


def test_full_queue_raises():
    started = threading.Event()
    release = threading.Event()

    def block(queue, data):
        started.set()
        release.wait(5)

    queue = JobQueue(thread_count=1, capacity=32)
    try:
        queue.add(block)
        assert started.wait(5)
        for _ in range(31):
            queue.add(lambda q, d: None)
        with pytest.raises(RuntimeError):
            queue.add(lambda q, d: None)
    finally:
        release.set()
        queue.close()


def test_add_after_close_raises():
    queue = JobQueue()
    queue.close()
    with pytest.raises(RuntimeError):
        queue.add(lambda q, d: None)


def test_long_job_sees_closed_flag():
    running = threading.Event()
    finished = []

    def loop(queue, data):
        running.set()
        while not queue.closed:
            running.wait(0.001)
        finished.append(queue.closed)

    queue = JobQueue()
    queue.add(loop)
    assert running.wait(5)
    assert queue.closed is False
    queue.close()
    assert queue.closed is True
    assert finished == [True]


@pytest.mark.parametrize("threads, capacity", [(0, 32), (1, 1)])
def test_invalid_queue_arguments(threads, capacity):
    with pytest.raises(ValueError):
        JobQueue(thread_count=threads, capacity=capacity)


# Seed

def test_seed_is_zero_at_start_of_1971():
    assert random_seed_from_time(datetime(1971, 1, 1)) == 0


@pytest.mark.parametrize(
    "step, expected",
    [(timedelta(seconds=1), 1), (timedelta(minutes=1), 60), (timedelta(hours=1), 3600),
     (timedelta(days=1), 86400)],
)
def test_seed_steps(step, expected):
    base = datetime(2020, 5, 10, 8, 20, 30)
    assert random_seed_from_time(base + step) - random_seed_from_time(base) == expected


def test_seed_year_step_and_wraps_to_u32():
    before = random_seed_from_time(datetime(1970, 1, 1))
    after = random_seed_from_time(datetime(1971, 1, 1))
    assert 0 <= before < 2 ** 32
    assert (after - before) % 2 ** 32 == 31557600


# Display sizes

def test_display_size_on_large_screen():
    assert next_display_size(0, 10000, 10000) == (1, 1920, 1080)
    assert next_display_size(1, 10000, 10000) == (2, 2560, 1440)
    assert next_display_size(2, 10000, 10000) == (0, 1280, 720)


def test_display_size_capped_counts_as_largest():
    assert next_display_size(0, 1920, 1080) == (2, 1920, 1080)
    index, width, height = next_display_size(0, 800, 600)
    assert (index, width, height) == (2, 800, 600)
    assert next_display_size(index, 800, 600)[0] == 2


# Audio cursor arithmetic

def test_audio_worked_example():
    assert _audio(0, 0, 0) == (0, 5872)


def test_audio_target_independent_of_lock_position():
    lock_a, count_a = _audio(0, 0, 0)
    lock_b, count_b = _audio(BUFFER_SIZE // 4 - 1, 0, 0)
    assert lock_b == BUFFER_SIZE - 4
    assert (lock_a + count_a) % BUFFER_SIZE == (lock_b + count_b) % BUFFER_SIZE


@pytest.mark.parametrize(
    "running, play, write",
    [(0, 0, 0), (1000, 4000, 8000), (44099, 170000, 1000), (123456, 88200, 88200)],
)
def test_audio_results_are_aligned_and_in_range(running, play, write):
    lock, count = _audio(running, play, write)
    assert 0 <= lock < BUFFER_SIZE
    assert 0 <= count < BUFFER_SIZE
    assert lock % 4 == 0
    assert count % 4 == 0


def test_audio_rejects_empty_buffer():
    with pytest.raises(ValueError):
        _audio(0, 0, 0, size=0)


# Command line

def test_main_rejects_unknown_option():
    with pytest.raises(SystemExit) as excinfo:
        main(["--bogus"])
    assert excinfo.value.code == 2