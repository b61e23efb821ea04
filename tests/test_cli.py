"""Tests for the command-line entry point"""

from tagfill.cli import apply_overrides, build_parser, main
from tagfill.orchestrator import ConfigManager


def test_missing_root_exits_with_error(tmp_path, capsys):
    code = main([str(tmp_path / "nope"), "--config", str(tmp_path / "absent.yaml")])

    assert code == 1
    assert "Path not found" in capsys.readouterr().out


def test_bad_config_exits_with_config_code(tmp_path, capsys):
    config = tmp_path / "tagfill.yaml"
    config.write_text("key: [unclosed", encoding="utf-8")

    code = main([str(tmp_path), "--config", str(config)])

    assert code == 2
    assert "Cannot read config" in capsys.readouterr().err


def test_empty_library_completes(tmp_path):
    library = tmp_path / "music"
    library.mkdir()

    code = main([str(library), "--config", str(tmp_path / "absent.yaml"), "--dry-run"])

    assert code == 0


def test_overrides_reach_config(tmp_path):
    config = ConfigManager(str(tmp_path / "absent.yaml"))
    args = build_parser().parse_args([
        "/srv/music", "--state-file", "state.jsonl", "--check-image-first",
        "--cooldown", "5", "--max-restarts", "-1", "--verbose",
    ])

    apply_overrides(config, args)

    assert config.library_root == "/srv/music"
    assert config.journal_path == "state.jsonl"
    assert config.check_image_first is True
    assert config.dry_run is False
    assert config.cooldown_seconds == 5
    assert config.max_restarts is None
    assert config.log_level == "DEBUG"


def test_absent_flags_keep_config_values(tmp_path):
    path = tmp_path / "tagfill.yaml"
    path.write_text("reconcile:\n  check_image_first: true\nrunner:\n  max_restarts: 3\n",
                    encoding="utf-8")
    config = ConfigManager(str(path))

    apply_overrides(config, build_parser().parse_args([]))

    assert config.check_image_first is True
    assert config.max_restarts == 3
