"""CHIM tool provider with an injected API client."""

from .client import ChimClient
from .tools import (
    CHANGES_PATH,
    OUTAGES_PATH,
    RETROS_PATH,
    ChangeFreezeStatusTool,
    CreateRecordTool,
    ListRecordsTool,
    SaveApiKeyTool,
)


class ChimToolProvider:
    """Tool provider for the CHIM API.

    The provider owns one instance of every CHIM tool, all sharing the
    client they were given. The server adapter registers them in the order
    returned by :attr:`tools`.
    """

    def __init__(self, client: ChimClient):
        """Initialize with a configured CHIM client.

        Args:
            client: Client used by every API-backed tool
        """
        self._client = client
        self._save_api_key_tool = SaveApiKeyTool()
        self._status_tool = ChangeFreezeStatusTool(client)
        self._list_changes_tool = ListRecordsTool(
            client,
            name="list_changes",
            path=CHANGES_PATH,
            description=(
                "Lists change notifications (GET /api/v1/changes/). "
                "Supports pagination query params."
            ),
        )
        self._create_change_tool = CreateRecordTool(
            client,
            name="create_change",
            path=CHANGES_PATH,
            description=(
                "Creates a Change notification (POST /api/v1/changes/). "
                "Provide the payload documented in the CHIM API guide."
            ),
        )
        self._list_outages_tool = ListRecordsTool(
            client,
            name="list_outages",
            path=OUTAGES_PATH,
            description=(
                "Lists incident/outage notifications (GET /api/v1/outages/). "
                "Supports pagination query params."
            ),
        )
        self._create_outage_tool = CreateRecordTool(
            client,
            name="create_outage",
            path=OUTAGES_PATH,
            description=(
                "Creates an Incident/Outage notification (POST /api/v1/outages/). "
                "Provide the payload documented in the CHIM API guide."
            ),
        )
        self._list_retros_tool = ListRecordsTool(
            client,
            name="list_retros",
            path=RETROS_PATH,
            description=(
                "Lists retrospectives created in CHIM (GET /api/v1/retros/). "
                "Supports pagination query params."
            ),
        )

    @property
    def client(self) -> ChimClient:
        """Access to the shared CHIM client."""
        return self._client

    @property
    def save_api_key_tool(self) -> SaveApiKeyTool:
        return self._save_api_key_tool

    @property
    def status_tool(self) -> ChangeFreezeStatusTool:
        return self._status_tool

    @property
    def list_changes_tool(self) -> ListRecordsTool:
        return self._list_changes_tool

    @property
    def create_change_tool(self) -> CreateRecordTool:
        return self._create_change_tool

    @property
    def list_outages_tool(self) -> ListRecordsTool:
        return self._list_outages_tool

    @property
    def create_outage_tool(self) -> CreateRecordTool:
        return self._create_outage_tool

    @property
    def list_retros_tool(self) -> ListRecordsTool:
        return self._list_retros_tool

    @property
    def tools(
        self,
    ) -> list[SaveApiKeyTool | ChangeFreezeStatusTool | ListRecordsTool | CreateRecordTool]:
        """All tools, in registration order."""
        return [
            self._save_api_key_tool,
            self._status_tool,
            self._list_changes_tool,
            self._create_change_tool,
            self._list_outages_tool,
            self._create_outage_tool,
            self._list_retros_tool,
        ]
