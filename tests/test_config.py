import pytest

from adsync.errors import ConfigError
from adsync.ingest import load_settings, load_shops

CONFIG = """
spreadsheet_id: ${TEST_SHEET_ID}
urls:
  token_url: https://auth.test/token
  metrics_url: https://api.test/stats/v2/accounts
shops:
  - name: alpha
    client_id: alpha-id
    client_secret: ${TEST_ALPHA_SECRET}
    user_id: "17"
    sheet_range: "Dash!B2:B5"
    snapshots:
      - time: "9:05"
        range: "History!B2:E2"
  - name: beta
    client_id: beta-id
    client_secret: beta-secret
    user_id: 18
    sheet_range: "Dash!C2:C5"
    items_range: "Items!A2:N"
"""


@pytest.fixture()
def config_file(tmp_path, monkeypatch):
    monkeypatch.setenv("TEST_SHEET_ID", "sheet-xyz")
    monkeypatch.setenv("TEST_ALPHA_SECRET", "s3cret")
    path = tmp_path / "shops.yml"
    path.write_text(CONFIG)
    return path


def test_load_settings(config_file):
    settings = load_settings(config_file)
    assert settings.spreadsheet_id == "sheet-xyz"
    assert settings.api_url == "https://api.avito.ru"
    alpha, beta = settings.shops
    assert alpha.credential.client_secret == "s3cret"
    assert alpha.user_id == 17
    assert alpha.snapshots[0].time_of_day == "09:05"
    assert alpha.snapshots[0].target_range == "History!B2:E2"
    assert alpha.items_range is None
    assert beta.snapshots == ()
    assert beta.items_range == "Items!A2:N"


def test_load_shops_from_env_path(config_file, monkeypatch):
    monkeypatch.setenv("SHOPS_CONFIG", str(config_file))
    assert [shop.name for shop in load_shops()] == ["alpha", "beta"]
    assert [shop.name for shop in load_shops(limit=1)] == ["alpha"]


def test_invalid_snapshot_time(tmp_path, config_file):
    path = tmp_path / "bad.yml"
    path.write_text(config_file.read_text().replace('"9:05"', '"25:99"'))
    with pytest.raises(ConfigError, match="25:99"):
        load_settings(path)


def test_missing_key(tmp_path, config_file):
    path = tmp_path / "bad.yml"
    path.write_text(config_file.read_text().replace("    sheet_range: \"Dash!C2:C5\"\n", ""))
    with pytest.raises(ConfigError, match="sheet_range"):
        load_settings(path)


def test_missing_file(tmp_path):
    with pytest.raises(ConfigError):
        load_settings(tmp_path / "absent.yml")


def test_unset_environment_variable(config_file, monkeypatch):
    monkeypatch.delenv("TEST_ALPHA_SECRET")
    with pytest.raises(ConfigError, match="TEST_ALPHA_SECRET"):
        load_settings(config_file)
