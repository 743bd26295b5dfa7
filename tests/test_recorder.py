import logging

import numpy as np
import soundfile as sf

from lemonwords.recorder import RECORDING_FILENAME, AudioRecorder


class FakeStream:
    def __init__(self, callback, fail_on_start=False):
        self.callback = callback
        self.fail_on_start = fail_on_start
        self.started = False
        self.closed = False

    def start(self):
        if self.fail_on_start:
            raise RuntimeError("device busy")
        self.started = True

    def stop(self):
        self.started = False

    def close(self):
        self.closed = True

    def feed(self, samples):
        chunk = np.asarray(samples, dtype="float32").reshape(-1, 1)
        self.callback(chunk, len(chunk), None, None)


class FakeSoundDevice:
    def __init__(self, fail_on_open=False, fail_on_start=False):
        self.fail_on_open = fail_on_open
        self.fail_on_start = fail_on_start
        self.streams = []

    def InputStream(self, samplerate, channels, dtype, callback):
        if self.fail_on_open:
            raise OSError("no input device")
        stream = FakeStream(callback, fail_on_start=self.fail_on_start)
        self.streams.append(stream)
        return stream


def test_recording_writes_to_fixed_file(tmp_path):
    sd = FakeSoundDevice()
    recorder = AudioRecorder(tmp_path, samplerate=12000, sd=sd)

    locator = recorder.start()
    assert locator == tmp_path / RECORDING_FILENAME
    assert recorder.is_recording
    assert recorder.start() == locator
    assert len(sd.streams) == 1

    sd.streams[0].feed([0.0, 0.25, -0.25, 0.5])
    path = recorder.stop()

    assert path == locator
    assert not recorder.is_recording
    assert sd.streams[0].closed
    data, samplerate = sf.read(path)
    assert samplerate == 12000
    assert len(data) == 4


def test_second_recording_overwrites_first(tmp_path):
    sd = FakeSoundDevice()
    recorder = AudioRecorder(tmp_path, sd=sd)

    recorder.start()
    sd.streams[-1].feed([0.1] * 10)
    first = recorder.stop()

    recorder.start()
    sd.streams[-1].feed([0.1] * 3)
    second = recorder.stop()

    assert first == second
    data, _ = sf.read(second)
    assert len(data) == 3
    assert list(tmp_path.iterdir()) == [second]


def test_failed_start_returns_to_idle(tmp_path, caplog):
    for sd in (FakeSoundDevice(fail_on_open=True), FakeSoundDevice(fail_on_start=True)):
        recorder = AudioRecorder(tmp_path, sd=sd)
        with caplog.at_level(logging.WARNING):
            assert recorder.start() is None
        assert not recorder.is_recording
        assert recorder.stop() is None
        for stream in sd.streams:
            assert stream.closed

    assert "Failed to start recording" in caplog.text


def test_stop_without_audio_is_a_no_op(tmp_path):
    recorder = AudioRecorder(tmp_path, sd=FakeSoundDevice())

    assert recorder.stop() is None
    recorder.start()
    assert recorder.stop() is None
    assert not (tmp_path / RECORDING_FILENAME).exists()
