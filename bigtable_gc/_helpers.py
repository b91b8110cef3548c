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
#
from __future__ import annotations

import datetime

from google.cloud._helpers import _microseconds_from_datetime
from google.protobuf import duration_pb2

from bigtable_gc.exceptions import InvalidRuleError

"""
Helper functions used in various places in the library.
"""

# smallest max_age accepted by the service
MIN_MAX_AGE = datetime.timedelta(milliseconds=1)

# largest span a protobuf Duration can hold, about 10,000 years
MAX_MAX_AGE = datetime.timedelta(seconds=315_576_000_000)

_ONE_MICROSECOND = datetime.timedelta(microseconds=1)


def _timedelta_to_duration_pb(value: datetime.timedelta) -> duration_pb2.Duration:
    """
    Convert a python timedelta into a protobuf Duration.
    """
    duration_pb = duration_pb2.Duration()
    duration_pb.FromTimedelta(value)
    return duration_pb


def _duration_pb_to_timedelta(duration_pb: duration_pb2.Duration) -> datetime.timedelta:
    """
    Convert a protobuf Duration into a python timedelta.

    Nanoseconds below microsecond resolution are truncated, the same way
    the service truncates max_age values.
    """
    return _seconds_nanos_to_timedelta(duration_pb.seconds, duration_pb.nanos)


def _timedelta_to_seconds_nanos(value: datetime.timedelta) -> tuple[int, int]:
    duration_pb = _timedelta_to_duration_pb(value)
    return duration_pb.seconds, duration_pb.nanos


def _seconds_nanos_to_timedelta(seconds: int, nanos: int) -> datetime.timedelta:
    # truncate toward zero, like Duration.ToTimedelta
    micros = abs(nanos) // 1000
    if nanos < 0:
        micros = -micros
    try:
        return datetime.timedelta(seconds=seconds, microseconds=micros)
    except OverflowError as exc:
        raise InvalidRuleError(
            f"age of {seconds}s {nanos}ns is out of range"
        ) from exc


def _timedelta_to_micros(value: datetime.timedelta) -> int:
    return value // _ONE_MICROSECOND


def _to_micros(value: int | datetime.datetime) -> int:
    """
    Normalize a point in time to integer microseconds since the epoch.

    Args:
      - value: either microseconds since the epoch, or a datetime. Naive
            datetimes are interpreted as UTC.
    Raises:
      - TypeError if value is neither an int nor a datetime
    """
    if isinstance(value, datetime.datetime):
        return _microseconds_from_datetime(value)
    if isinstance(value, int) and not isinstance(value, bool):
        return value
    raise TypeError(
        f"expected int microseconds or datetime, got {type(value).__name__}"
    )
