# Copyright 2026 Google LLC
#
# Licensed under the Apache License, Version 2.0 (the "License");
# you may not use this file except in compliance with the License.
# You may obtain a copy of the License at
#
#     http://www.apache.org/licenses/LICENSE-2.0
#
# Unless required by applicable law or agreed to in writing, software
# distributed under the License is distributed on an "AS IS" BASIS,
# WITHOUT WARRANTIES OR CONDITIONS OF ANY KIND, either express or implied.
# See the License for the specific language governing permissions and
# limitations under the License.

import datetime

import pytest

import bigtable_gc._helpers as _helpers


class TestToMicros:
    def test_int(self):
        assert _helpers._to_micros(1234) == 1234

    def test_aware_datetime(self):
        value = datetime.datetime(1970, 1, 1, 0, 0, 1, 5, tzinfo=datetime.timezone.utc)
        assert _helpers._to_micros(value) == 1_000_005

    def test_naive_datetime_is_utc(self):
        value = datetime.datetime(1970, 1, 1, 0, 0, 2)
        assert _helpers._to_micros(value) == 2_000_000

    def test_other_timezone(self):
        tz = datetime.timezone(datetime.timedelta(hours=1))
        value = datetime.datetime(1970, 1, 1, 1, 0, 0, tzinfo=tz)
        assert _helpers._to_micros(value) == 0

    @pytest.mark.parametrize("value", [True, 1.5, "1234", None])
    def test_bad_type(self, value):
        with pytest.raises(TypeError):
            _helpers._to_micros(value)


class TestDurations:
    def test_timedelta_to_duration_pb(self):
        got = _helpers._timedelta_to_duration_pb(datetime.timedelta(seconds=2, microseconds=7))
        assert got.seconds == 2
        assert got.nanos == 7000

    def test_duration_pb_to_timedelta(self):
        from google.protobuf import duration_pb2

        duration_pb = duration_pb2.Duration(seconds=3, nanos=4500)
        got = _helpers._duration_pb_to_timedelta(duration_pb)
        assert got == datetime.timedelta(seconds=3, microseconds=4)

    def test_timedelta_to_seconds_nanos(self):
        got = _helpers._timedelta_to_seconds_nanos(datetime.timedelta(milliseconds=5))
        assert got == (0, 5000000)

    @pytest.mark.parametrize(
        "seconds,nanos,expected",
        [
            (0, 5000000, datetime.timedelta(milliseconds=5)),
            (1, 1999, datetime.timedelta(seconds=1, microseconds=1)),
            (0, 999, datetime.timedelta(0)),
            (0, -1500, datetime.timedelta(microseconds=-1)),
            (0, 3_000_000_000, datetime.timedelta(seconds=3)),
        ],
    )
    def test_seconds_nanos_to_timedelta(self, seconds, nanos, expected):
        assert _helpers._seconds_nanos_to_timedelta(seconds, nanos) == expected

    def test_timedelta_to_micros(self):
        value = datetime.timedelta(days=1, microseconds=3)
        assert _helpers._timedelta_to_micros(value) == 86_400_000_003

    @pytest.mark.parametrize(
        "seconds,nanos",
        [(10**15, 0), (-(10**15), 0), (0, 10**30)],
    )
    def test_seconds_nanos_to_timedelta_overflow(self, seconds, nanos):
        from bigtable_gc.exceptions import InvalidRuleError

        with pytest.raises(InvalidRuleError):
            _helpers._seconds_nanos_to_timedelta(seconds, nanos)

    def test_duration_pb_to_timedelta_overflow(self):
        from google.protobuf import duration_pb2
        from bigtable_gc.exceptions import InvalidRuleError

        duration_pb = duration_pb2.Duration(seconds=10**15)
        with pytest.raises(InvalidRuleError):
            _helpers._duration_pb_to_timedelta(duration_pb)
