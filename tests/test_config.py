import pytest

from transfinite import config
from transfinite.config import (TRANSFINITE_CONFIG, SurfaceSettings, clear_cache,
                                load_settings, settings_from_mapping)
from transfinite.surface import SideBasedSurface


@pytest.fixture(autouse=True)
def _fresh_cache(monkeypatch, tmp_path):
    monkeypatch.delenv(TRANSFINITE_CONFIG, raising=False)
    monkeypatch.setattr(config, '_USER_CONFIG', tmp_path / 'no-such-settings.yaml')
    clear_cache()
    yield
    clear_cache()


def test_defaults():
    settings = load_settings()
    assert settings == SurfaceSettings()
    assert settings.use_gamma
    assert settings.epsilon == 1.0e-8
    assert settings.twist_step == 1.0e-4
    assert settings.resolution == 15


def test_validation():
    with pytest.raises(ValueError):
        SurfaceSettings(epsilon=0.0)
    with pytest.raises(ValueError):
        SurfaceSettings(twist_step=-1.0)
    with pytest.raises(ValueError):
        SurfaceSettings(resolution=0)


def test_from_mapping():
    base = SurfaceSettings(resolution=40)
    settings = settings_from_mapping({'use_gamma': False, 'epsilon': '1e-9'}, base)
    assert settings.use_gamma is False
    assert settings.epsilon == 1.0e-9
    assert settings.resolution == 40
    assert settings_from_mapping(None) == SurfaceSettings()
    with pytest.raises(ValueError):
        settings_from_mapping({'gamma': True})
    with pytest.raises(ValueError):
        settings_from_mapping(['use_gamma'])


def test_use_gamma_must_be_bool(tmp_path):
    for value in ('false', 'no', 0, 1, None):
        with pytest.raises(ValueError):
            settings_from_mapping({'use_gamma': value})
    path = tmp_path / 'quoted.yaml'
    path.write_text('use_gamma: "false"\n')
    with pytest.raises(ValueError):
        load_settings(path)


def test_load_file(tmp_path):
    path = tmp_path / 'settings.yaml'
    path.write_text('use_gamma: false\nresolution: 7\n')
    settings = load_settings(path)
    assert not settings.use_gamma
    assert settings.resolution == 7
    assert settings.epsilon == 1.0e-8


def test_environment(tmp_path, monkeypatch):
    path = tmp_path / 'env.yaml'
    path.write_text('twist_step: 1.0e-3\n')
    monkeypatch.setenv(TRANSFINITE_CONFIG, str(path))
    assert load_settings().twist_step == 1.0e-3


def test_missing_file(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_settings(tmp_path / 'absent.yaml')


def test_bad_file(tmp_path):
    path = tmp_path / 'bad.yaml'
    path.write_text('epsilon: -1\n')
    with pytest.raises(ValueError):
        load_settings(path)


def test_surface_uses_loaded_settings(tmp_path, monkeypatch):
    path = tmp_path / 'surface.yaml'
    path.write_text('use_gamma: false\nresolution: 4\n')
    monkeypatch.setenv(TRANSFINITE_CONFIG, str(path))
    surf = SideBasedSurface()
    assert not surf.use_gamma
    assert surf.settings.resolution == 4
