import pytest

from dungeon_crawler import config
from dungeon_crawler.config import (
    FovSettings,
    GeneratorSettings,
    Settings,
    apply_env,
    load_settings,
    parse_seed,
    validate_raw,
)
from dungeon_crawler.errors import ConfigurationError
from dungeon_crawler.map import Size


def test_bundled_defaults():
    settings = load_settings()
    gen = settings.generator
    assert gen.map_size == Size(50, 50)
    assert gen.room_count == 25
    assert gen.room_width_range == (4, 10)
    assert gen.room_height_range == (2, 8)
    assert gen.depth == 0
    assert gen.seed is None
    assert settings.fov == FovSettings(view_range=8, global_vision=False)
    gen.validate()


def test_partial_file_gets_schema_defaults(tmp_path):
    path = tmp_path / "settings.yaml"
    path.write_text("generator:\n  room_count: 5\n  seed: dungeon\n", encoding="utf-8")
    settings = load_settings(path)
    assert settings.generator.room_count == 5
    assert settings.generator.seed == "dungeon"
    assert settings.generator.map_size == Size(50, 50)
    assert settings.fov.view_range == 8


def test_user_file_is_preferred_over_bundled(isolated_settings):
    isolated_settings.parent.mkdir(parents=True)
    isolated_settings.write_text("fov:\n  view_range: 3\n", encoding="utf-8")
    assert load_settings().fov.view_range == 3


@pytest.mark.parametrize(
    "text,fragment",
    [
        ("generator:\n  room_count: 0\n", "room_count"),
        ("generator:\n  map_size: {width: 2, height: 10}\n", "map_size.width"),
        ("generator:\n  rooms: 3\n", "rooms"),
        ("fov:\n  view_range: far\n", "view_range"),
    ],
)
def test_schema_violations(tmp_path, text, fragment):
    path = tmp_path / "bad.yaml"
    path.write_text(text, encoding="utf-8")
    with pytest.raises(ConfigurationError) as exc:
        load_settings(path)
    assert fragment in str(exc.value)


def test_unparseable_and_missing_files(tmp_path):
    broken = tmp_path / "broken.yaml"
    broken.write_text("generator: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigurationError):
        load_settings(broken)
    with pytest.raises(ConfigurationError):
        load_settings(tmp_path / "nope.yaml")


def test_validate_raw_fills_defaults():
    data = validate_raw({})
    assert data["generator"]["room_count"] == 25
    assert data["fov"]["global_vision"] is False
    with pytest.raises(ConfigurationError):
        validate_raw(["not", "a", "mapping"])


def test_apply_env_overrides():
    settings = apply_env(
        Settings(),
        {"DC_MAP_WIDTH": "30", "DC_ROOM_COUNT": "7", "DC_SEED": "abc", "DC_VIEW_RANGE": "5"},
    )
    assert settings.generator.map_size == Size(30, 50)
    assert settings.generator.room_count == 7
    assert settings.generator.seed == "abc"
    assert settings.fov.view_range == 5

    assert apply_env(Settings(), {"DC_SEED": "42"}).generator.seed == 42
    assert apply_env(Settings(), {}) == Settings()


def test_apply_env_rejects_non_integers():
    with pytest.raises(ConfigurationError):
        apply_env(Settings(), {"DC_DEPTH": "deep"})


def test_from_env_reads_process_environment(monkeypatch):
    monkeypatch.setenv("DC_DEPTH", "4")
    monkeypatch.setenv("DC_MAP_HEIGHT", "20")
    settings = Settings.from_env()
    assert settings.generator.depth == 4
    assert settings.generator.map_size == Size(50, 20)


def test_user_settings_path_is_patched(isolated_settings):
    assert config.user_settings_path() == isolated_settings


@pytest.mark.parametrize(
    "kwargs",
    [
        {"room_count": 0},
        {"depth": -2},
        {"map_size": Size(50, 2)},
        {"room_height_range": (3, 2)},
        {"room_width_range": (4, 49)},
    ],
)
def test_generator_settings_validate(kwargs):
    with pytest.raises(ConfigurationError):
        GeneratorSettings(**kwargs).validate()


def test_unreadable_files_are_configuration_errors(tmp_path):
    with pytest.raises(ConfigurationError) as exc:
        load_settings(tmp_path)
    assert "Cannot read" in str(exc.value)

    binary = tmp_path / "binary.yaml"
    binary.write_bytes(b"\xff\xfe\x00junk")
    with pytest.raises(ConfigurationError):
        load_settings(binary)


def test_unreadable_user_file_is_a_configuration_error(isolated_settings):
    isolated_settings.mkdir(parents=True)
    with pytest.raises(ConfigurationError):
        load_settings()


@pytest.mark.parametrize(
    "text,expected",
    [("42", 42), ("-7", -7), ("--5", "--5"), ("²", "²"), ("0xff", "0xff"), ("run-1", "run-1")],
)
def test_parse_seed(text, expected):
    assert parse_seed(text) == expected


def test_env_seed_that_only_looks_numeric_stays_text():
    assert apply_env(Settings(), {"DC_SEED": "--5"}).generator.seed == "--5"


def test_settings_dict_passes_schema():
    settings = Settings(generator=GeneratorSettings(map_size=Size(40, 30), room_count=9, seed="abc"))
    raw = settings.to_dict()
    assert raw["generator"]["map_size"] == {"width": 40, "height": 30}
    assert Settings.from_dict(validate_raw(raw)) == settings
