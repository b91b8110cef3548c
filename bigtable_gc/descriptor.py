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
"""Structural descriptors for garbage collection rules."""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

from bigtable_gc.exceptions import MalformedRuleError

KIND_MAX_VERSIONS = "maxVersions"
KIND_MAX_AGE = "maxAge"
KIND_UNION = "union"
KIND_INTERSECTION = "intersection"

KINDS = (KIND_MAX_VERSIONS, KIND_MAX_AGE, KIND_UNION, KIND_INTERSECTION)
COMBINATOR_KINDS = (KIND_UNION, KIND_INTERSECTION)


@dataclass(frozen=True)
class RuleDescriptor:
    """
    An immutable, transport-neutral description of a garbage collection rule.

    Only the fields relevant to ``kind`` are populated:

    * ``maxVersions``: ``versions``
    * ``maxAge``: ``age_seconds`` and ``age_nanos``
    * ``union`` / ``intersection``: ``children``
    """

    kind: str
    versions: int | None = None
    age_seconds: int | None = None
    age_nanos: int | None = None
    children: tuple[RuleDescriptor, ...] = ()

    def __post_init__(self):
        children = self.children
        if not isinstance(children, (tuple, str, bytes, Mapping)) and hasattr(
            children, "__iter__"
        ):
            object.__setattr__(self, "children", tuple(children))

    def to_dict(self) -> dict[str, Any]:
        """
        Returns the camelCase mapping form of the descriptor, as exchanged
        with the table admin layer
        """
        descriptor_dict: dict[str, Any] = {"kind": self.kind}
        if self.kind == KIND_MAX_VERSIONS:
            descriptor_dict["versions"] = self.versions
        elif self.kind == KIND_MAX_AGE:
            descriptor_dict["ageSeconds"] = self.age_seconds or 0
            descriptor_dict["ageNanos"] = self.age_nanos or 0
        else:
            descriptor_dict["children"] = [child.to_dict() for child in self.children]
        return descriptor_dict

    def _fields(self) -> dict[str, Any]:
        # unlike to_dict, keeps unset fields absent and children unconverted
        fields: dict[str, Any] = {"kind": self.kind}
        if self.versions is not None:
            fields["versions"] = self.versions
        if self.age_seconds is not None:
            fields["ageSeconds"] = self.age_seconds
        if self.age_nanos is not None:
            fields["ageNanos"] = self.age_nanos
        if self.children is not None:
            fields["children"] = self.children
        return fields

    @classmethod
    def from_dict(cls, descriptor_dict: Mapping[str, Any]) -> RuleDescriptor:
        """
        Parse the mapping form of a descriptor

        Raises:
          - MalformedRuleError if the kind is unknown, or a field required by
              the kind is missing or has the wrong type
        """
        if isinstance(descriptor_dict, RuleDescriptor):
            # a typed descriptor gets the same checks as its mapping form
            cls.from_dict(descriptor_dict._fields())
            return descriptor_dict
        if not isinstance(descriptor_dict, Mapping):
            raise MalformedRuleError(
                f"rule descriptor must be a mapping, got {type(descriptor_dict).__name__}",
                descriptor_dict,
            )
        kind = descriptor_dict.get("kind")
        if kind not in KINDS:
            raise MalformedRuleError(
                f"unrecognized rule kind: {kind!r}", descriptor_dict
            )
        if kind == KIND_MAX_VERSIONS:
            if "versions" not in descriptor_dict:
                raise MalformedRuleError(
                    "maxVersions descriptor requires 'versions'", descriptor_dict
                )
            return cls(
                kind,
                versions=_require_int(descriptor_dict, "versions"),
            )
        if kind == KIND_MAX_AGE:
            if "ageSeconds" not in descriptor_dict and "ageNanos" not in descriptor_dict:
                raise MalformedRuleError(
                    "maxAge descriptor requires 'ageSeconds' or 'ageNanos'",
                    descriptor_dict,
                )
            return cls(
                kind,
                age_seconds=_require_int(descriptor_dict, "ageSeconds", default=0),
                age_nanos=_require_int(descriptor_dict, "ageNanos", default=0),
            )
        children = descriptor_dict.get("children")
        if children is None:
            raise MalformedRuleError(
                f"{kind} descriptor requires 'children'", descriptor_dict
            )
        if isinstance(children, (str, bytes, Mapping)) or not hasattr(
            children, "__iter__"
        ):
            raise MalformedRuleError(
                f"'children' must be a sequence of descriptors, got {type(children).__name__}",
                descriptor_dict,
            )
        return cls(kind, children=tuple(cls.from_dict(child) for child in children))


def _require_int(descriptor_dict: Mapping[str, Any], key: str, default=None) -> int:
    value = descriptor_dict.get(key, default)
    # bool is a subclass of int, but never a valid count or duration
    if isinstance(value, bool) or not isinstance(value, int):
        raise MalformedRuleError(
            f"'{key}' must be an int, got {type(value).__name__}", descriptor_dict
        )
    return value
