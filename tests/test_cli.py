from dungeon_crawler.cli import main
from dungeon_crawler.config import GeneratorSettings
from dungeon_crawler.generation import generate
from dungeon_crawler.map import Size
from dungeon_crawler.rng import RNGManager

ARGS = ["--seed", "7", "--width", "30", "--height", "20", "--rooms", "8"]


def _map_lines(out):
    lines = out.splitlines()
    assert lines[0].startswith("# seed=0x07 depth=0 size=30x20")
    return lines[1:]


def test_prints_level(capsys):
    assert main(ARGS) == 0
    rows = _map_lines(capsys.readouterr().out)
    assert len(rows) == 20
    assert all(len(row) == 30 for row in rows)
    assert sum(row.count("@") for row in rows) == 1


def test_output_is_deterministic(capsys):
    main(ARGS)
    first = capsys.readouterr().out
    main(ARGS)
    assert capsys.readouterr().out == first


def test_path_overlay(capsys):
    _, rooms = generate(GeneratorSettings(map_size=Size(30, 20), room_count=8), RNGManager(7).level_rng(0))
    goal = rooms[-1].center()
    assert main(ARGS + ["--path", f"{goal.x},{goal.y}"]) == 0
    rows = _map_lines(capsys.readouterr().out)
    if len(rooms) > 1:
        assert any("*" in row for row in rows)


def test_fov_hides_unseen_tiles(capsys):
    assert main(ARGS + ["--fov"]) == 0
    rows = _map_lines(capsys.readouterr().out)
    assert any(" " in row for row in rows)

    assert main(ARGS + ["--fov", "--reveal-all"]) == 0
    rows = _map_lines(capsys.readouterr().out)
    assert not any(" " in row for row in rows)


def test_unreachable_path_exit_code(capsys):
    assert main(ARGS + ["--path", "0,0"]) == 1
    assert "Cannot reach" in capsys.readouterr().err


def test_configuration_error_exit_code(capsys):
    assert main(ARGS[:-1] + ["0"]) == 2
    assert capsys.readouterr().err.startswith("error:")


def test_env_overrides_apply(monkeypatch, capsys):
    monkeypatch.setenv("DC_MAP_HEIGHT", "15")
    assert main(["--seed", "7", "--width", "30", "--rooms", "5"]) == 0
    out = capsys.readouterr().out
    assert "size=30x15" in out


def test_unreadable_config_exit_code(tmp_path, capsys):
    assert main(["--config", str(tmp_path)]) == 2
    assert "Cannot read" in capsys.readouterr().err


def test_seed_that_is_not_an_integer(capsys):
    assert main(["--seed=--5", "--width", "30", "--height", "20", "--rooms", "4"]) == 0
    assert capsys.readouterr().out.startswith("# seed=0x")
