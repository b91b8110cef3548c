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

"""User-friendly container for the column families of a Bigtable table."""

from google.api_core.exceptions import NotFound
from google.cloud.bigtable_admin_v2.types import table as table_v2_pb2

from bigtable_gc.column_family import ColumnFamily
from bigtable_gc.gc_rule import gc_rule_from_pb

SCHEMA_VIEW = table_v2_pb2.Table.View.SCHEMA_VIEW


class Table(object):
    """Representation of a Google Cloud Bigtable Table.

    .. note::

        Only the column families of the table are exposed. They are not
        stored locally; every listing reads the table schema.

    We can use a :class:`Table` to:

    * :meth:`create_column_family` in the table
    * :meth:`list_column_families` in the table
    * :meth:`get_column_family` from the table

    :type table_id: str
    :param table_id: The ID of the table.

    :type client: :class:`~bigtable_gc.client.Client`
    :param client: The client owning the instance of the table.
    """

    def __init__(self, table_id, client):
        self.table_id = table_id
        self._client = client

    @property
    def name(self):
        """Table name used in requests.

        .. note::

          This property will not change if ``table_id`` does not, but the
          return value is not cached.

        :rtype: str
        :returns: ``projects/{project}/instances/{instance}/tables/{table_id}``
        """
        return f"{self._client.instance_name}/tables/{self.table_id}"

    def __eq__(self, other):
        if not isinstance(other, self.__class__):
            return NotImplemented
        return other.table_id == self.table_id and other._client == self._client

    def __ne__(self, other):
        return not self == other

    def column_family(self, column_family_id, gc_rule=None):
        """Factory to create a column family associated with this table.

        :type column_family_id: str
        :param column_family_id: The ID of the column family. Must be of the
                                 form ``[_a-zA-Z0-9][-_.a-zA-Z0-9]*``.

        :type gc_rule: :class:`.GarbageCollectionRule`
        :param gc_rule: (Optional) The garbage collection settings for this
                        column family. Rule configs and descriptors are
                        accepted too, see :func:`.build_gc_rule`.

        :rtype: :class:`.ColumnFamily`
        :returns: A column family owned by this table.
        """
        return ColumnFamily(column_family_id, self, gc_rule=gc_rule)

    def create_column_family(self, column_family_id, gc_rule=None):
        """Create a column family in this table.

        :raises: :class:`~google.api_core.exceptions.AlreadyExists` if the
                 family exists.

        :rtype: :class:`.ColumnFamily`
        :returns: The created column family.
        """
        column_family = self.column_family(column_family_id, gc_rule=gc_rule)
        column_family.create()
        return column_family

    def list_column_families(self):
        """List the column families owned by this table.

        :rtype: dict
        :returns: Dictionary of column families attached to this table. Keys
                  are strings (column family names) and values are
                  :class:`.ColumnFamily` instances.
        :raises: :class:`~google.api_core.exceptions.NotFound` if the table
                 does not exist.
        """
        table_client = self._client.table_admin_client
        table_pb = table_client.get_table(
            request={"name": self.name, "view": SCHEMA_VIEW}
        )

        result = {}
        for column_family_id, value_pb in table_pb.column_families.items():
            gc_rule = gc_rule_from_pb(value_pb.gc_rule)
            column_family = self.column_family(column_family_id, gc_rule=gc_rule)
            result[column_family_id] = column_family
        return result

    def get_column_family(self, column_family_id):
        """Read a single column family, with its current GC rule.

        :raises: :class:`~google.api_core.exceptions.NotFound` if the table
                 or the family does not exist.
        """
        families = self.list_column_families()
        try:
            return families[column_family_id]
        except KeyError:
            raise NotFound(
                f"Column family {column_family_id} not found in {self.name}"
            ) from None
