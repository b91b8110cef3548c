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

"""Garbage collection rules for Google Cloud Bigtable column families."""

from __future__ import annotations

import abc
import datetime
import logging

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any, Iterable, Sequence, Tuple

from google.cloud.bigtable_admin_v2.types import table as table_v2_pb2
from google.protobuf import duration_pb2

from bigtable_gc import _helpers
from bigtable_gc.descriptor import (
    KIND_INTERSECTION,
    KIND_MAX_AGE,
    KIND_MAX_VERSIONS,
    KIND_UNION,
    RuleDescriptor,
)
from bigtable_gc.exceptions import InvalidRuleError, MalformedRuleError

LOGGER = logging.getLogger(__name__)

# keys accepted by build_gc_rule
_CONFIG_KEYS = frozenset(
    ["versions", "age", "union", "intersection", "intersect", "rules"]
)
_AGE_KEYS = frozenset(["seconds", "nanos"])

# max_num_versions is an int32 in the table admin API
_MAX_NUM_VERSIONS = 2**31 - 1


@dataclass(frozen=True)
class CellVersion:
    """
    The view of a single cell version needed to evaluate a rule.

    :type version_rank: int
    :param version_rank: 1-based recency of this version among all versions
                         of the cell. 1 is the most recent.

    :type timestamp_micros: int
    :param timestamp_micros: The cell timestamp, in microseconds since the
                             epoch.
    """

    version_rank: int
    timestamp_micros: int

    def __post_init__(self):
        if self.version_rank < 1:
            raise ValueError("version_rank must be 1 or greater")


class GarbageCollectionRule(object, metaclass=abc.ABCMeta):
    """Garbage collection rule for column families within a table.

    Cells in the column family (within a table) fitting the rule will be
    deleted during garbage collection.

    Rules are immutable. Equality is structural, and the order of the
    children of a union or intersection is significant.
    """

    def is_garbage(self, cell, now: int | datetime.datetime) -> bool:
        """Decide whether ``cell`` is eligible for garbage collection.

        :type cell: :class:`CellVersion`
        :param cell: Any object exposing ``version_rank`` and
                     ``timestamp_micros``.

        :type now: int or :class:`datetime.datetime`
        :param now: The evaluation time, in microseconds since the epoch or
                    as a datetime. Never read from a clock.

        :rtype: bool
        :returns: True if the cell version is garbage under this rule.
        """
        return self._is_garbage(cell, _helpers._to_micros(now))

    @abc.abstractmethod
    def _is_garbage(self, cell, now_micros: int) -> bool:
        raise NotImplementedError()

    @abc.abstractmethod
    def to_wire_form(self) -> RuleDescriptor:
        raise NotImplementedError()

    @abc.abstractmethod
    def to_pb(self) -> table_v2_pb2.GcRule:
        raise NotImplementedError()


@dataclass(frozen=True)
class MaxVersionsGCRule(GarbageCollectionRule):
    """Garbage collection limiting the number of versions of a cell.

    :type max_num_versions: int
    :param max_num_versions: The maximum number of versions. Must be 1 or
                             greater and fit in an int32.

    :raises: :class:`~bigtable_gc.exceptions.InvalidRuleError` if
             ``max_num_versions`` is not an int in that range.
    """

    max_num_versions: int

    def __post_init__(self):
        if isinstance(self.max_num_versions, bool) or not isinstance(
            self.max_num_versions, int
        ):
            raise InvalidRuleError(
                f"max_num_versions must be an int, got {self.max_num_versions!r}"
            )
        if self.max_num_versions < 1:
            raise InvalidRuleError(
                f"max_num_versions must be 1 or greater, got {self.max_num_versions}"
            )
        if self.max_num_versions > _MAX_NUM_VERSIONS:
            raise InvalidRuleError(
                f"max_num_versions must be at most {_MAX_NUM_VERSIONS}, "
                f"got {self.max_num_versions}"
            )

    def _is_garbage(self, cell, now_micros):
        return cell.version_rank > self.max_num_versions

    def to_wire_form(self):
        return RuleDescriptor(KIND_MAX_VERSIONS, versions=self.max_num_versions)

    def to_pb(self):
        """Converts the garbage collection rule to a protobuf.

        :rtype: :class:`.table_v2_pb2.GcRule`
        :returns: The converted current object.
        """
        return table_v2_pb2.GcRule(max_num_versions=self.max_num_versions)


@dataclass(frozen=True)
class MaxAgeGCRule(GarbageCollectionRule):
    """Garbage collection limiting the age of a cell.

    A version is retained while ``now - timestamp <= max_age``. A version
    exactly ``max_age`` old is still live.

    :type max_age: :class:`datetime.timedelta`
    :param max_age: The maximum age allowed for a cell in the table. Must be
                    at least one millisecond and at most
                    315,576,000,000 seconds. Held at microsecond resolution.

    :raises: :class:`~bigtable_gc.exceptions.InvalidRuleError` if
             ``max_age`` is not a timedelta in that range.
    """

    max_age: datetime.timedelta

    def __post_init__(self):
        if not isinstance(self.max_age, datetime.timedelta):
            raise InvalidRuleError(
                f"max_age must be a timedelta, got {type(self.max_age).__name__}"
            )
        if self.max_age < _helpers.MIN_MAX_AGE:
            raise InvalidRuleError(
                f"max_age must be at least 1 millisecond, got {self.max_age}"
            )
        if self.max_age > _helpers.MAX_MAX_AGE:
            raise InvalidRuleError(
                f"max_age must be at most {_helpers.MAX_MAX_AGE}, got {self.max_age}"
            )

    def _is_garbage(self, cell, now_micros):
        elapsed = now_micros - cell.timestamp_micros
        return elapsed > _helpers._timedelta_to_micros(self.max_age)

    def to_wire_form(self):
        seconds, nanos = _helpers._timedelta_to_seconds_nanos(self.max_age)
        return RuleDescriptor(KIND_MAX_AGE, age_seconds=seconds, age_nanos=nanos)

    def to_pb(self):
        """Converts the garbage collection rule to a protobuf.

        :rtype: :class:`.table_v2_pb2.GcRule`
        :returns: The converted current object.
        """
        max_age = _helpers._timedelta_to_duration_pb(self.max_age)
        return table_v2_pb2.GcRule(max_age=max_age)


@dataclass(frozen=True)
class _GCRuleCombination(GarbageCollectionRule):
    """Base for rules that combine an ordered sequence of child rules.

    :type rules: list
    :param rules: List of :class:`GarbageCollectionRule`. Must hold at least
                  one rule; stored as a tuple.
    """

    rules: Tuple[GarbageCollectionRule, ...]

    def __post_init__(self):
        if isinstance(self.rules, GarbageCollectionRule) or not hasattr(
            self.rules, "__iter__"
        ):
            raise InvalidRuleError(
                f"{type(self).__name__} expects a sequence of rules"
            )
        rules = tuple(self.rules)
        if not rules:
            raise InvalidRuleError(
                f"{type(self).__name__} requires at least one rule"
            )
        for rule in rules:
            if not isinstance(rule, GarbageCollectionRule):
                raise InvalidRuleError(
                    f"{type(self).__name__} children must be GarbageCollectionRule "
                    f"instances, got {type(rule).__name__}"
                )
        object.__setattr__(self, "rules", rules)

    def to_wire_form(self):
        return RuleDescriptor(
            self._kind, children=tuple(rule.to_wire_form() for rule in self.rules)
        )


@dataclass(frozen=True)
class GCRuleUnion(_GCRuleCombination):
    """Union of garbage collection rules.

    A version is garbage if it is garbage under any of the rules. Rules are
    evaluated left to right and evaluation stops at the first match.

    :type rules: list
    :param rules: List of :class:`GarbageCollectionRule`.
    """

    _kind = KIND_UNION

    def _is_garbage(self, cell, now_micros):
        return any(rule._is_garbage(cell, now_micros) for rule in self.rules)

    def to_pb(self):
        """Converts the union into a single GC rule as a protobuf.

        :rtype: :class:`.table_v2_pb2.GcRule`
        :returns: The converted current object.
        """
        union = table_v2_pb2.GcRule.Union(rules=[rule.to_pb() for rule in self.rules])
        return table_v2_pb2.GcRule(union=union)


@dataclass(frozen=True)
class GCRuleIntersection(_GCRuleCombination):
    """Intersection of garbage collection rules.

    A version is garbage only if it is garbage under every rule. Rules are
    evaluated left to right and evaluation stops at the first rule that
    keeps the version.

    :type rules: list
    :param rules: List of :class:`GarbageCollectionRule`.
    """

    _kind = KIND_INTERSECTION

    def _is_garbage(self, cell, now_micros):
        return all(rule._is_garbage(cell, now_micros) for rule in self.rules)

    def to_pb(self):
        """Converts the intersection into a single GC rule as a protobuf.

        :rtype: :class:`.table_v2_pb2.GcRule`
        :returns: The converted current object.
        """
        intersection = table_v2_pb2.GcRule.Intersection(
            rules=[rule.to_pb() for rule in self.rules]
        )
        return table_v2_pb2.GcRule(intersection=intersection)


def is_garbage(
    gc_rule: GarbageCollectionRule | None, cell, now: int | datetime.datetime
) -> bool:
    """
    Decide whether a cell version is eligible for garbage collection

    A family without a rule retains every version forever.

    Args:
      - gc_rule: the rule attached to the column family, or None
      - cell: a CellVersion, or any object with version_rank and timestamp_micros
      - now: the evaluation time, as microseconds since the epoch or a datetime
    Returns:
      - True if the version is garbage
    """
    if gc_rule is None:
        return False
    result = gc_rule.is_garbage(cell, now)
    LOGGER.debug(
        "gc decision: rule=%r version_rank=%s timestamp_micros=%s garbage=%s",
        gc_rule,
        cell.version_rank,
        cell.timestamp_micros,
        result,
    )
    return result


def partition_versions(
    gc_rule: GarbageCollectionRule | None,
    timestamps_micros: Iterable[int],
    now: int | datetime.datetime,
) -> tuple[list[CellVersion], list[CellVersion]]:
    """
    Split the versions of one column into live and garbage versions

    Versions are ranked newest first. Versions sharing a timestamp keep
    their input order.

    Args:
      - gc_rule: the rule attached to the column family, or None
      - timestamps_micros: the timestamps of every version of the cell
      - now: the evaluation time
    Returns:
      - a (live, garbage) tuple of CellVersion lists, each ordered by rank
    """
    now_micros = _helpers._to_micros(now)
    ranked = sorted(timestamps_micros, key=lambda ts: -ts)
    live: list[CellVersion] = []
    garbage: list[CellVersion] = []
    for rank, timestamp_micros in enumerate(ranked, start=1):
        cell = CellVersion(rank, timestamp_micros)
        if is_garbage(gc_rule, cell, now_micros):
            garbage.append(cell)
        else:
            live.append(cell)
    return live, garbage


def to_wire_form(gc_rule: GarbageCollectionRule) -> RuleDescriptor:
    """Produce the structural descriptor of a rule."""
    return gc_rule.to_wire_form()


def from_wire_form(
    descriptor: RuleDescriptor | Mapping[str, Any]
) -> GarbageCollectionRule:
    """
    Rebuild a rule from its descriptor

    Args:
      - descriptor: a RuleDescriptor, or its mapping form
    Raises:
      - MalformedRuleError for an unknown kind or a missing required field
      - InvalidRuleError if the parameters violate rule invariants, such as
          an empty union
    """
    descriptor = RuleDescriptor.from_dict(descriptor)
    if descriptor.kind == KIND_MAX_VERSIONS:
        return MaxVersionsGCRule(descriptor.versions)
    if descriptor.kind == KIND_MAX_AGE:
        return MaxAgeGCRule(
            _helpers._seconds_nanos_to_timedelta(
                descriptor.age_seconds or 0, descriptor.age_nanos or 0
            )
        )
    children = [from_wire_form(child) for child in descriptor.children]
    if descriptor.kind == KIND_UNION:
        return GCRuleUnion(children)
    if descriptor.kind == KIND_INTERSECTION:
        return GCRuleIntersection(children)
    raise MalformedRuleError(f"unrecognized rule kind: {descriptor.kind!r}", descriptor)


def gc_rule_from_pb(gc_rule_pb) -> GarbageCollectionRule | None:
    """Convert a protobuf GC rule to a native object.

    :type gc_rule_pb: :class:`.table_v2_pb2.GcRule`
    :param gc_rule_pb: The GC rule to convert.

    :rtype: :class:`GarbageCollectionRule` or :data:`NoneType <types.NoneType>`
    :returns: An instance of one of the native rules defined
              in :module:`column_family` or :data:`None` if no values were
              set on the protobuf passed in.
    :raises: :class:`~bigtable_gc.exceptions.MalformedRuleError` if the rule
             name does not correspond to a known rule.
    """
    raw_pb = table_v2_pb2.GcRule.pb(gc_rule_pb, coerce=True)
    rule_name = raw_pb.WhichOneof("rule")
    if rule_name is None:
        return None

    if rule_name == "max_num_versions":
        return MaxVersionsGCRule(raw_pb.max_num_versions)
    elif rule_name == "max_age":
        return MaxAgeGCRule(_helpers._duration_pb_to_timedelta(raw_pb.max_age))
    elif rule_name == "union":
        return GCRuleUnion([gc_rule_from_pb(rule) for rule in raw_pb.union.rules])
    elif rule_name == "intersection":
        rules = [gc_rule_from_pb(rule) for rule in raw_pb.intersection.rules]
        return GCRuleIntersection(rules)
    else:
        raise MalformedRuleError(f"Unexpected rule name: {rule_name}", gc_rule_pb)


def build_gc_rule(rule_config) -> GarbageCollectionRule | None:
    """
    Build a rule from a declarative config object

    The config mirrors the rule objects used by the table admin samples::

        {"versions": 2}
        {"age": {"seconds": 0, "nanos": 5000000}}
        {"versions": 1, "age": datetime.timedelta(milliseconds=5), "union": True}
        {"intersection": True, "rules": [{"versions": 2}, {...}]}

    An outer ``{"rule": {...}}`` wrapper is accepted. When more than one
    bound is given, exactly one of ``union`` or ``intersection``
    (``intersect``) must be set; the children are ordered age, versions,
    then nested ``rules``. A config producing a single rule returns that
    rule unwrapped.

    Args:
      - rule_config: a mapping, a RuleDescriptor, an existing
          GarbageCollectionRule, or None
    Returns:
      - the rule, or None for no garbage collection policy
    Raises:
      - InvalidRuleError if the config is ambiguous or violates rule
          invariants
    """
    if rule_config is None or isinstance(rule_config, GarbageCollectionRule):
        return rule_config
    if isinstance(rule_config, RuleDescriptor):
        return from_wire_form(rule_config)
    if not isinstance(rule_config, Mapping):
        raise InvalidRuleError(
            f"rule config must be a mapping, got {type(rule_config).__name__}"
        )
    if "rule" in rule_config:
        if len(rule_config) != 1:
            raise InvalidRuleError("'rule' can't be combined with other keys")
        return build_gc_rule(rule_config["rule"])

    unknown = set(rule_config) - _CONFIG_KEYS
    if unknown:
        raise InvalidRuleError(f"unknown rule config keys: {sorted(unknown)}")

    union = _flag(rule_config, "union")
    intersection = _flag(rule_config, "intersection") or _flag(rule_config, "intersect")
    if union and intersection:
        raise InvalidRuleError("union and intersection are mutually exclusive")

    rules: list[GarbageCollectionRule] = []
    if "age" in rule_config:
        rules.append(MaxAgeGCRule(_coerce_age(rule_config["age"])))
    if "versions" in rule_config:
        rules.append(MaxVersionsGCRule(rule_config["versions"]))
    for nested in _nested_configs(rule_config):
        nested_rule = build_gc_rule(nested)
        if nested_rule is None:
            raise InvalidRuleError("nested rule configs can't be empty")
        rules.append(nested_rule)

    if not rules:
        raise InvalidRuleError("no garbage collection rules were specified")
    if len(rules) == 1:
        return rules[0]
    if union:
        return GCRuleUnion(rules)
    if intersection:
        return GCRuleIntersection(rules)
    raise InvalidRuleError(
        "a union or intersection is required when combining rules"
    )


def _flag(rule_config: Mapping[str, Any], key: str) -> bool:
    value = rule_config.get(key, False)
    if not isinstance(value, bool):
        raise InvalidRuleError(f"'{key}' must be a bool, got {value!r}")
    return value


def _nested_configs(rule_config: Mapping[str, Any]) -> Sequence[Any]:
    nested = rule_config.get("rules", ())
    if isinstance(nested, (str, bytes, Mapping)) or not hasattr(nested, "__iter__"):
        raise InvalidRuleError("'rules' must be a sequence of rule configs")
    return list(nested)


def _coerce_age(age) -> datetime.timedelta:
    """
    Accepts a timedelta, a protobuf Duration, or a
    ``{"seconds": ..., "nanos": ...}`` mapping
    """
    if isinstance(age, datetime.timedelta):
        return age
    if isinstance(age, duration_pb2.Duration):
        return _helpers._duration_pb_to_timedelta(age)
    if isinstance(age, Mapping):
        unknown = set(age) - _AGE_KEYS
        if unknown:
            raise InvalidRuleError(f"unknown age keys: {sorted(unknown)}")
        seconds = age.get("seconds", 0)
        nanos = age.get("nanos", 0)
        for value in (seconds, nanos):
            if isinstance(value, bool) or not isinstance(value, int):
                raise InvalidRuleError("age seconds and nanos must be ints")
        return _helpers._seconds_nanos_to_timedelta(seconds, nanos)
    raise InvalidRuleError(
        f"age must be a timedelta or a seconds/nanos mapping, got {type(age).__name__}"
    )
