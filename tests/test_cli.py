"""
Tests for the command-line entry point
"""

import json

from rpglump.main import main

from tests.builders import create_enemy_block, create_reld, i32s


def make_game(make_project_dir):
    return make_project_dir({
        "general.reld": create_reld([(b'TITL', b'Quest'), (b'STGL', i32s(50))]),
        "enemies.reld": create_reld([(b'ENEM', create_enemy_block("Slime"))]),
        "heroes.reld": b'RELD' + i32s(1) + b'HERO' + i32s(99),
    })


def test_writes_summary(make_project_dir, tmp_path):
    output = tmp_path / "out" / "summary.json"
    assert main([str(make_game(make_project_dir)), "-o", str(output)]) == 0

    summary = json.loads(output.read_text(encoding='utf-8'))
    assert summary['project_name'] == "GAME"
    assert summary['container_format'] == "directory"
    assert summary['lump_count'] == 3
    assert summary['general']['title'] == "Quest"
    assert summary['enemies'][0]['name'] == "Slime"
    assert summary['heroes'] is None
    assert "heroes" in summary['errors']
    assert "items" in summary['missing']
    assert summary['tilesets'] == []


def test_domain_filter(make_project_dir, tmp_path):
    output = tmp_path / "summary.json"
    root = make_game(make_project_dir)
    assert main([str(root), "--domain", "enemies", "--domain", "general", "-o", str(output)]) == 0

    summary = json.loads(output.read_text(encoding='utf-8'))
    assert 'heroes' not in summary
    assert summary['errors'] == {}
    assert summary['enemies'][0]['name'] == "Slime"


def test_stdout_and_log_dir(make_project_dir, tmp_path, capsys):
    log_dir = tmp_path / "logs"
    assert main([str(make_game(make_project_dir)), "--domain", "general", "--log-dir", str(log_dir)]) == 0
    assert json.loads(capsys.readouterr().out)['general']['starting_gold'] == 50
    assert len(list(log_dir.glob("rpglump_*.log"))) == 1


def test_missing_project(tmp_path):
    assert main([str(tmp_path / "absent.rpg")]) == 1
