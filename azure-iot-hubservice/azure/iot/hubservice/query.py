# -------------------------------------------------------------------------
# Copyright (c) Microsoft Corporation. All rights reserved.
# Licensed under the MIT License. See License.txt in the project root for
# license information.
# --------------------------------------------------------------------------
import logging
from typing import Optional
from .custom_typing import JSONSerializable
from .http_client import IoTHubServiceHTTPClient

logger = logging.getLogger(__name__)


class Query(object):
    """A query in the IoT Hub query language, ready to be executed

    :ivar str query: The query string
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient, query: str) -> None:
        self._http_client = http_client
        self.query = query

    def __str__(self) -> str:
        return self.query

    async def execute(self) -> JSONSerializable:
        """Execute the query

        :returns: The result of the query as returned by IoT Hub, usually a list of documents
        :raises: :class:`azure.iot.hubservice.exceptions.ServiceError` if IoTHub responds
            with failure
        """
        return await self._http_client.query(query=self.query)


class QueryBuilder(object):
    """Assembles a query from its clauses. Clauses that are not set are left out.

    Example::

        query = QueryBuilder(http_client).select("*").from_("devices").build()
        # query.query == "SELECT * FROM devices"
    """

    def __init__(self, http_client: IoTHubServiceHTTPClient) -> None:
        self._http_client = http_client
        self._select: Optional[str] = None
        self._from: Optional[str] = None
        self._where: Optional[str] = None
        self._group_by: Optional[str] = None

    def select(self, select_clause: str) -> "QueryBuilder":
        self._select = select_clause
        return self

    def from_(self, from_clause: str) -> "QueryBuilder":
        self._from = from_clause
        return self

    def and_where(self, where_clause: str) -> "QueryBuilder":
        self._where = where_clause
        return self

    def group_by(self, group_by_clause: str) -> "QueryBuilder":
        self._group_by = group_by_clause
        return self

    def build(self) -> Query:
        clauses = []
        if self._select is not None:
            clauses.append("SELECT " + self._select)
        if self._from is not None:
            clauses.append("FROM " + self._from)
        if self._where is not None:
            clauses.append("WHERE " + self._where)
        if self._group_by is not None:
            clauses.append("GROUP BY " + self._group_by)
        query = " ".join(clauses)
        logger.debug("Built query: {}".format(query))
        return Query(self._http_client, query)
