"""Tests for the Google Sheets store adapter over a mocked Values API."""

import json

import httpx
import pytest
import pytest_asyncio

from mahjong_ledger.dal.sheets_client import SheetsClient
from mahjong_ledger.dal.sheets_store import SheetsGameStore
from mahjong_ledger.errors import RecordNotFound, SheetsError
from mahjong_ledger.models.common import Seat
from mahjong_ledger.models.player import RosterPlayer

HEADER = ["Game ID", "Timestamp", "East", "East Score", "South", "South Score",
          "West", "West Score", "North", "North Score"]

GAME_ROWS = [
    HEADER,
    ["AAA111", "2024-01-01T10:00:00Z", "Alice", 10, "Bob", -10],
    [],
    ["BBB222", "2024-01-02T10:00:00Z", "Alice + Carol", -6, "Bob", 6, "", "", "", "", "extra"],
    ["CCC333", "2024-01-03T10:00:00Z", "Carol", 4, "Bob", -4, "", 0, "", 0],
]

ROSTER_ROWS = [
    ["Name", "SettleUpMemberID"],
    ["Alice", "m1"],
    ["Bob"],
    ["Carol", "m3"],
]


class StubCredentials:
    """Skips the OAuth exchange."""

    async def get_token(self, http):
        return "test-token"


class FakeValuesApi:
    """Serves canned sheet values and records every request."""

    def __init__(self, status_code: int = 200):
        self.requests: list[httpx.Request] = []
        self.status_code = status_code

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.status_code != 200:
            return httpx.Response(self.status_code, json={"error": "boom"})
        if request.method == "GET":
            rows = ROSTER_ROWS if "/values/Players" in request.url.path else GAME_ROWS
            return httpx.Response(200, json={"values": rows})
        return httpx.Response(200, json={})

    def writes(self) -> list[httpx.Request]:
        return [r for r in self.requests if r.method != "GET"]


@pytest.fixture
def api():
    return FakeValuesApi()


@pytest_asyncio.fixture
async def sheets_store(api):
    http = httpx.AsyncClient(transport=httpx.MockTransport(api))
    client = SheetsClient("sheet-id", StubCredentials(), http=http)
    yield SheetsGameStore(client)
    await client.close()


class TestGameRows:

    @pytest.mark.asyncio
    async def test_list_skips_header_blank_and_malformed(self, sheets_store, api):
        records = await sheets_store.list_records()
        assert [r.game_id for r in records] == ["AAA111", "CCC333"]
        # short row padded to the full width
        assert records[0].seat(Seat.WEST).player_names == []
        assert records[0].seat(Seat.NORTH).score == 0.0
        request = api.requests[0]
        assert request.headers["Authorization"] == "Bearer test-token"
        assert request.url.params["valueRenderOption"] == "UNFORMATTED_VALUE"

    @pytest.mark.asyncio
    async def test_update_writes_single_row(self, sheets_store, api, record_factory):
        record = record_factory("CCC333", [("Carol", 8.0), ("Bob", -8.0)])
        await sheets_store.update_record("CCC333", record)
        (write,) = api.writes()
        assert write.method == "PUT"
        assert write.url.path.endswith("/values/Sheet1!A5:J5")
        assert json.loads(write.content)["values"] == [record.to_row()]

    @pytest.mark.asyncio
    async def test_delete_clears_single_row(self, sheets_store, api):
        await sheets_store.delete_record("AAA111")
        (write,) = api.writes()
        assert write.method == "POST"
        assert write.url.path.endswith("/values/Sheet1!A2:J2:clear")

    @pytest.mark.asyncio
    async def test_missing_game_writes_nothing(self, sheets_store, api, record_factory):
        with pytest.raises(RecordNotFound):
            await sheets_store.delete_record("ZZZ999")
        with pytest.raises(RecordNotFound):
            await sheets_store.update_record("ZZZ999", record_factory("ZZZ999", []))
        assert api.writes() == []

    @pytest.mark.asyncio
    async def test_append(self, sheets_store, api, record_factory):
        record = record_factory("DDD444", [("Alice", 1.0), ("Bob", -1.0)])
        assert await sheets_store.append_record(record) == "DDD444"
        (write,) = api.writes()
        assert write.url.path.endswith("/values/Sheet1!A1:append")
        assert write.url.params["valueInputOption"] == "RAW"
        assert json.loads(write.content)["values"][0][0] == "DDD444"

    @pytest.mark.asyncio
    async def test_api_error_raises_sheets_error(self, record_factory):
        api = FakeValuesApi(status_code=500)
        http = httpx.AsyncClient(transport=httpx.MockTransport(api))
        store = SheetsGameStore(SheetsClient("sheet-id", StubCredentials(), http=http))
        with pytest.raises(SheetsError):
            await store.list_records()
        await store.close()


class TestRoster:

    @pytest.mark.asyncio
    async def test_list_skips_header_and_incomplete_rows(self, sheets_store):
        players = await sheets_store.list_players()
        assert players == [
            RosterPlayer(name="Alice", settleup_member_id="m1"),
            RosterPlayer(name="Carol", settleup_member_id="m3"),
        ]

    @pytest.mark.asyncio
    async def test_delete_player_clears_row(self, sheets_store, api):
        assert await sheets_store.delete_player("Carol") is True
        (write,) = api.writes()
        assert write.url.path.endswith("/values/Players!A4:B4:clear")

    @pytest.mark.asyncio
    async def test_delete_unknown_player(self, sheets_store, api):
        assert await sheets_store.delete_player("Zed") is False
        assert api.writes() == []

    @pytest.mark.asyncio
    async def test_add_player_appends(self, sheets_store, api):
        await sheets_store.add_player(RosterPlayer(name="Dave", settleup_member_id="m4"))
        (write,) = api.writes()
        assert json.loads(write.content) == {"values": [["Dave", "m4"]]}
