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

"""Client for administering column family garbage collection rules."""

from __future__ import annotations

import logging
import os

import grpc

from google.auth.credentials import AnonymousCredentials
from google.cloud.client import ClientWithProject
from google.cloud.environment_vars import BIGTABLE_EMULATOR

from google.cloud.bigtable_admin_v2 import BigtableTableAdminClient
from google.cloud.bigtable_admin_v2.services.bigtable_table_admin.transports import (
    BigtableTableAdminGrpcTransport,
)

from bigtable_gc.table import Table

LOGGER = logging.getLogger(__name__)

# environment variable naming the instance, when not passed explicitly
INSTANCE_ID_ENV = "INSTANCE_ID"

TABLE_ADMIN_SCOPE = "https://www.googleapis.com/auth/bigtable.admin.table"
"""Scope for administering tables and column families."""

_DEFAULT_EMULATOR_PROJECT = "emulator-project"


class Client(ClientWithProject):
    """Client for administering column families of a Bigtable instance.

    :type project: :class:`str` or :func:`unicode <unicode>`
    :param project: (Optional) The ID of the project which owns the
                    instance. If not provided, will be attempted to be
                    determined from the environment.

    :type instance_id: str
    :param instance_id: (Optional) The ID of the instance owning the tables.
                        Defaults to the ``INSTANCE_ID`` environment variable.

    :type credentials: :class:`~google.auth.credentials.Credentials`
    :param credentials: (Optional) The OAuth2 Credentials to use for this
                        client. If not passed, falls back to the default
                        inferred from the environment.

    :type client_options:
        :class:`~google.api_core.client_options.ClientOptions` or :class:`dict`
    :param client_options: (Optional) Client options used to set user options
                           on the table admin client.

    :type admin_client:
        :class:`~google.cloud.bigtable_admin_v2.BigtableTableAdminClient`
    :param admin_client: (Optional) A preconfigured table admin client. When
                         omitted, one is created on first use, pointed at
                         ``BIGTABLE_EMULATOR_HOST`` when that is set.

    :raises: :class:`ValueError <exceptions.ValueError>` if no instance ID
             is given or found in the environment.
    """

    SCOPE = (TABLE_ADMIN_SCOPE,)
    """The scopes required for Google Cloud Bigtable table administration."""

    _table_admin_client = None

    def __init__(
        self,
        project=None,
        instance_id=None,
        credentials=None,
        client_options=None,
        admin_client=None,
    ):
        self._emulator_host = os.getenv(BIGTABLE_EMULATOR)
        if self._emulator_host is not None:
            if credentials is None:
                credentials = AnonymousCredentials()
            if project is None:
                project = _DEFAULT_EMULATOR_PROJECT

        if instance_id is None:
            instance_id = os.getenv(INSTANCE_ID_ENV)
        if not instance_id:
            raise ValueError(
                f"instance_id must be passed or set in ${INSTANCE_ID_ENV}"
            )

        super(Client, self).__init__(
            project=project,
            credentials=credentials,
            client_options=client_options,
        )
        self.instance_id = instance_id
        self._admin_client_options = client_options
        self._table_admin_client = admin_client

    @property
    def instance_name(self):
        """Fully-qualified name of the instance.

        :rtype: str
        :returns: ``projects/{project}/instances/{instance_id}``
        """
        return f"projects/{self.project}/instances/{self.instance_id}"

    @property
    def table_admin_client(self):
        """Getter for the gRPC stub used for the Table Admin API.

        :rtype: :class:`.bigtable_admin_v2.BigtableTableAdminClient`
        :returns: A BigtableTableAdminClient object.
        """
        if self._table_admin_client is None:
            self._table_admin_client = self._create_table_admin_client()
        return self._table_admin_client

    def _create_table_admin_client(self):
        if self._emulator_host is not None:
            LOGGER.debug("using bigtable emulator at %s", self._emulator_host)
            channel = grpc.insecure_channel(self._emulator_host)
            transport = BigtableTableAdminGrpcTransport(channel=channel)
            return BigtableTableAdminClient(transport=transport)
        return BigtableTableAdminClient(
            credentials=self._credentials,
            client_options=self._admin_client_options,
        )

    def table(self, table_id):
        """Factory to create a table associated with this client's instance.

        :type table_id: str
        :param table_id: The ID of the table.

        :rtype: :class:`~bigtable_gc.table.Table`
        :returns: The table owned by this client's instance.
        """
        return Table(table_id, self)
