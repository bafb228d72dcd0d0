import os

from cuboard import config


def test_default_keymap_is_bundled():
    assert os.path.isfile(config.DEFAULT_KEYMAP_PATH)
    assert "default" in config.available_keymaps()


def test_resolve_bundled_name():
    assert config.resolve_keymap_path("default") == config.DEFAULT_KEYMAP_PATH


def test_resolve_passes_paths_through(tmp_path):
    custom = str(tmp_path / "mine.json")
    assert config.resolve_keymap_path(custom) == custom


def test_keymaps_ship_inside_the_package():
    package_dir = os.path.dirname(os.path.abspath(config.__file__))
    assert os.path.commonpath([package_dir, config.DEFAULT_KEYMAP_PATH]) == package_dir
