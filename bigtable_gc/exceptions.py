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


class GCRuleError(ValueError):
    """Base class for errors raised while handling garbage collection rules."""


class InvalidRuleError(GCRuleError):
    """
    Exception raised when a garbage collection rule is constructed with
    parameters that violate its invariants

    Examples: a non-positive version count, an age below one millisecond,
    or a union / intersection without any child rules.
    """

    pass


class MalformedRuleError(GCRuleError):
    """
    Exception raised when a rule descriptor can't be decoded

    Raised for an unrecognized ``kind``, or when a field required by the
    descriptor's kind is missing or of the wrong type.
    """

    def __init__(self, message: str, descriptor=None):
        super().__init__(message)
        self.descriptor = descriptor
