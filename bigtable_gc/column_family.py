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

"""User friendly container for Google Cloud Bigtable Column Family."""

import logging
import re

from google.api_core.exceptions import NotFound
from google.cloud.bigtable_admin_v2.types import bigtable_table_admin
from google.cloud.bigtable_admin_v2.types import table as table_v2_pb2

from bigtable_gc.gc_rule import build_gc_rule
from bigtable_gc.gc_rule import is_garbage

LOGGER = logging.getLogger(__name__)

_COLUMN_FAMILY_ID_RE = re.compile(r"^[_a-zA-Z0-9][-_.a-zA-Z0-9]*$")


class ColumnFamily(object):
    """Representation of a Google Cloud Bigtable Column Family.

    We can use a :class:`ColumnFamily` to:

    * :meth:`create` itself
    * :meth:`update` itself
    * :meth:`delete` itself
    * :meth:`reload` its GC rule
    * decide whether a cell version :meth:`is_garbage`

    :type column_family_id: str
    :param column_family_id: The ID of the column family. Must be of the
                             form ``[_a-zA-Z0-9][-_.a-zA-Z0-9]*``.

    :type table: :class:`Table <bigtable_gc.table.Table>`
    :param table: The table that owns the column family.

    :type gc_rule: :class:`GarbageCollectionRule`
    :param gc_rule: (Optional) The garbage collection settings for this
                    column family. Rule configs and descriptors are accepted
                    too, see :func:`~bigtable_gc.gc_rule.build_gc_rule`.
                    ``None`` retains every version forever.

    :raises: :class:`ValueError <exceptions.ValueError>` if the ID is
             malformed, :class:`~bigtable_gc.exceptions.InvalidRuleError`
             if the rule is.
    """

    def __init__(self, column_family_id, table, gc_rule=None):
        if not _COLUMN_FAMILY_ID_RE.match(column_family_id):
            raise ValueError(f"Invalid column family ID: {column_family_id!r}")
        self.column_family_id = column_family_id
        self._table = table
        self.gc_rule = build_gc_rule(gc_rule)

    @property
    def name(self):
        """Column family name used in requests.

        .. note::

          This property will not change if ``column_family_id`` does not, but
          the return value is not cached.

        The Column family name is of the form

            ``"projects/../zones/../clusters/../tables/../columnFamilies/.."``

        :rtype: str
        :returns: The column family name.
        """
        return self._table.name + "/columnFamilies/" + self.column_family_id

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return (
            other.column_family_id == self.column_family_id
            and other._table == self._table
            and other.gc_rule == self.gc_rule
        )

    def __ne__(self, other):
        return not self == other

    def __repr__(self):
        return f"ColumnFamily({self.column_family_id!r}, gc_rule={self.gc_rule!r})"

    def to_pb(self):
        """Converts the column family to a protobuf.

        :rtype: :class:`.table_v2_pb2.ColumnFamily`
        :returns: The converted current object.
        """
        if self.gc_rule is None:
            return table_v2_pb2.ColumnFamily()
        else:
            return table_v2_pb2.ColumnFamily(gc_rule=self.gc_rule.to_pb())

    def get_metadata(self):
        """Read the current GC rule from the table, as a descriptor.

        :rtype: :class:`~bigtable_gc.descriptor.RuleDescriptor`
        :returns: The descriptor of the family's rule, or :data:`None` if
                  the family has no rule.
        :raises: :class:`~google.api_core.exceptions.NotFound` if the family
                 does not exist.
        """
        gc_rule = self.get_gc_rule()
        if gc_rule is None:
            return None
        return gc_rule.to_wire_form()

    def get_gc_rule(self):
        """Read the current GC rule from the table.

        :rtype: :class:`GarbageCollectionRule`
        :returns: The rule, or :data:`None` if the family has no rule.
        :raises: :class:`~google.api_core.exceptions.NotFound` if the family
                 does not exist.
        """
        self.reload()
        return self.gc_rule

    def reload(self):
        """Replace the local GC rule with the one stored in the table.

        :raises: :class:`~google.api_core.exceptions.NotFound` if the family
                 does not exist.
        """
        remote = self._table.get_column_family(self.column_family_id)
        self.gc_rule = remote.gc_rule

    def exists(self):
        """Check whether the column family exists.

        :rtype: bool
        :returns: True if the column family exists, else False.
        """
        try:
            families = self._table.list_column_families()
        except NotFound:
            return False
        return self.column_family_id in families

    def get(self, auto_create=False, gc_rule=None):
        """Load the column family, optionally creating it when missing.

        :type auto_create: bool
        :param auto_create: (Optional) Create the family if it does not exist.

        :type gc_rule: :class:`GarbageCollectionRule`
        :param gc_rule: (Optional) The rule used when the family is created.
                        Ignored when the family already exists.

        :rtype: :class:`ColumnFamily`
        :returns: This column family, with its rule refreshed.
        :raises: :class:`~google.api_core.exceptions.NotFound` if the family
                 does not exist and ``auto_create`` is False.
        """
        try:
            self.reload()
        except NotFound:
            if not auto_create:
                raise
            if gc_rule is not None:
                self.gc_rule = build_gc_rule(gc_rule)
            self.create()
        return self

    def create(self):
        """Create this column family.

        :raises: :class:`~google.api_core.exceptions.AlreadyExists` if the
                 family exists.
        """
        column_family = self.to_pb()
        modification = bigtable_table_admin.ModifyColumnFamiliesRequest.Modification(
            id=self.column_family_id, create=column_family
        )
        self._modify_column_families(modification)

    def update(self):
        """Update this column family.

        The GC rule stored in the table is replaced wholesale by
        :attr:`gc_rule`. It is never merged with the previous rule.

        .. note::

            Only the GC rule can be updated. By changing the column family ID,
            you will simply be referring to a different column family.
        """
        column_family = self.to_pb()
        modification = bigtable_table_admin.ModifyColumnFamiliesRequest.Modification(
            id=self.column_family_id, update=column_family
        )
        self._modify_column_families(modification)

    def set_gc_rule(self, gc_rule):
        """Replace the GC rule of this column family.

        The new rule replaces the old one locally and in the table; the two
        are not composed. Passing ``None`` clears the policy.

        :type gc_rule: :class:`GarbageCollectionRule`
        :param gc_rule: The new rule, a rule config, or a descriptor.
        """
        self.gc_rule = build_gc_rule(gc_rule)
        self.update()

    def delete(self):
        """Delete this column family."""
        modification = bigtable_table_admin.ModifyColumnFamiliesRequest.Modification(
            id=self.column_family_id, drop=True
        )
        self._modify_column_families(modification)

    def is_garbage(self, cell, now):
        """Decide whether a version of a cell in this family is garbage.

        :type cell: :class:`~bigtable_gc.gc_rule.CellVersion`
        :param cell: The version to evaluate.

        :type now: int or :class:`datetime.datetime`
        :param now: The evaluation time.

        :rtype: bool
        :returns: True if the current rule makes the version garbage.
        """
        return is_garbage(self.gc_rule, cell, now)

    def _modify_column_families(self, modification):
        LOGGER.debug("modifying column family %s: %s", self.name, modification)
        client = self._table._client
        client.table_admin_client.modify_column_families(
            request={"name": self._table.name, "modifications": [modification]}
        )
