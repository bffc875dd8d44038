# test/test_result.py
import time

import pytest

from signalbook.core import ComputationResult, ResultMetadata, InvalidInput


def test_timed_result_has_float64_metadata():
    started = time.perf_counter()
    res = ComputationResult.timed(started, [1.0, 2.0], 16)

    assert res.data == [1.0, 2.0]
    assert res.success
    assert res.metadata.precision == 64
    assert res.metadata.memory_used == 16
    assert res.metadata.computation_time >= 0.0
    assert res.metadata.error is None


def test_metadata_defaults():
    m = ResultMetadata()
    assert m.success is True
    assert m.precision == 64


def test_metadata_rejects_other_precision_and_negative_sizes():
    with pytest.raises(InvalidInput):
        ResultMetadata(precision=32)
    with pytest.raises(InvalidInput):
        ResultMetadata(memory_used=-1)
    with pytest.raises(InvalidInput):
        ResultMetadata(computation_time=-0.5)


def test_failed_metadata_carries_error_text():
    res = ComputationResult(data=None, metadata=ResultMetadata(success=False, error="nope"))
    assert not res.success
    assert res.metadata.error == "nope"
