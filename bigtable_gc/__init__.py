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
"""Garbage collection rules for Google Cloud Bigtable column families."""

from bigtable_gc.version import __version__

from bigtable_gc.client import Client
from bigtable_gc.column_family import ColumnFamily
from bigtable_gc.descriptor import RuleDescriptor
from bigtable_gc.exceptions import GCRuleError
from bigtable_gc.exceptions import InvalidRuleError
from bigtable_gc.exceptions import MalformedRuleError
from bigtable_gc.gc_rule import CellVersion
from bigtable_gc.gc_rule import GarbageCollectionRule
from bigtable_gc.gc_rule import GCRuleIntersection
from bigtable_gc.gc_rule import GCRuleUnion
from bigtable_gc.gc_rule import MaxAgeGCRule
from bigtable_gc.gc_rule import MaxVersionsGCRule
from bigtable_gc.gc_rule import build_gc_rule
from bigtable_gc.gc_rule import from_wire_form
from bigtable_gc.gc_rule import gc_rule_from_pb
from bigtable_gc.gc_rule import is_garbage
from bigtable_gc.gc_rule import partition_versions
from bigtable_gc.gc_rule import to_wire_form
from bigtable_gc.table import Table

__all__ = (
    "__version__",
    "Client",
    "Table",
    "ColumnFamily",
    "RuleDescriptor",
    "GCRuleError",
    "InvalidRuleError",
    "MalformedRuleError",
    "CellVersion",
    "GarbageCollectionRule",
    "MaxVersionsGCRule",
    "MaxAgeGCRule",
    "GCRuleUnion",
    "GCRuleIntersection",
    "build_gc_rule",
    "is_garbage",
    "partition_versions",
    "to_wire_form",
    "from_wire_form",
    "gc_rule_from_pb",
)
