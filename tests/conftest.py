import pendulum
import pytest
from gspread.exceptions import GSpreadException

from adsync.ingest.models import Credential, Settings, Shop, SnapshotSpec
from adsync.ingest.tokens import TokenCache
from adsync.logic.reporting import ReportingRepository
from adsync.sheets.client import SheetsClient

TOKEN_URL = "https://auth.test/token"
METRICS_URL = "https://api.test/stats/v2/accounts"
API_URL = "https://api.test"
API_HOST = "api.test"


class FakeSpreadsheet:
    """In-memory stand-in for gspread.Spreadsheet values calls."""

    def __init__(self, ranges=None, fail_reads=()):
        self.ranges = dict(ranges or {})
        self.fail_reads = set(fail_reads)
        self.updates = []
        self.batches = []

    def values_update(self, range_a1, params=None, body=None):
        self.updates.append({"range": range_a1, "params": params, "values": body["values"]})
        return {"updatedRange": range_a1}

    def values_batch_update(self, body=None):
        self.batches.append(body)
        return {"totalUpdatedCells": 0}

    def values_get(self, range_a1, params=None):
        if range_a1 in self.fail_reads:
            raise GSpreadException(f"cannot read {range_a1}")
        values = self.ranges.get(range_a1)
        if values is None:
            return {"range": range_a1}
        return {"range": range_a1, "values": values}


class Clock:
    def __init__(self, start):
        self.now = start

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now = self.now.add(**kwargs)


@pytest.fixture()
def clock():
    return Clock(pendulum.datetime(2026, 3, 2, 9, 0, tz="UTC"))


@pytest.fixture()
def token_cache(clock):
    return TokenCache(TOKEN_URL, clock=clock)


@pytest.fixture()
def shops():
    return [
        Shop(
            name="alpha",
            credential=Credential("alpha-id", "alpha-secret"),
            user_id=1,
            sheet_range="Dash!B2:B5",
            snapshots=(SnapshotSpec("12:00", "History!B2:E2"), SnapshotSpec("18:30", "History!B3:E3")),
            items_range="Items!A2:N",
        ),
        Shop(
            name="beta",
            credential=Credential("beta-id", "beta-secret"),
            user_id=2,
            sheet_range="Dash!C2:C5",
            snapshots=(SnapshotSpec("12:00", "History!B4:E4"),),
        ),
    ]


@pytest.fixture()
def settings(shops):
    return Settings(
        spreadsheet_id="sheet-1",
        token_url=TOKEN_URL,
        metrics_url=METRICS_URL,
        api_url=API_URL,
        shops=tuple(shops),
    )


@pytest.fixture()
def spreadsheet():
    return FakeSpreadsheet()


@pytest.fixture()
def repository(shops, spreadsheet):
    return ReportingRepository(shops, SheetsClient(spreadsheet))


def token_response(token="tok-1", expires_in=3600):
    return {"access_token": token, "expires_in": expires_in, "token_type": "Bearer"}


def stats_response(groupings):
    return {
        "result": {
            "dataTotalCount": len(groupings),
            "groupings": [
                {"id": gid, "type": "item", "metrics": [{"slug": k, "value": v} for k, v in metrics.items()]}
                for gid, metrics in groupings
            ],
        }
    }
