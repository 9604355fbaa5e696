"""
Settings loading tests.
"""
from pathlib import Path

from autopricing.config.settings import DATA_DIR_ENV, Settings


def test_defaults(tmp_path, monkeypatch):
    monkeypatch.delenv(DATA_DIR_ENV, raising=False)
    settings = Settings.load(project_root=tmp_path)

    assert settings.data_dir == tmp_path / 'data'
    assert settings.store_file == tmp_path / 'data' / 'local_storage.json'
    assert settings.history_key == 'pricingHistory'
    assert settings.theme_key == 'theme'
    assert settings.vat_rate == 0.12


def test_data_dir_from_environment(tmp_path, monkeypatch):
    monkeypatch.setenv(DATA_DIR_ENV, str(tmp_path / 'elsewhere'))
    settings = Settings.load(project_root=tmp_path)

    assert settings.data_dir == Path(tmp_path / 'elsewhere')
    assert settings.store_file.parent == tmp_path / 'elsewhere'
