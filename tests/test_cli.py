"""Integration tests for the CLI using CliRunner."""

import json
import os
from pathlib import Path
from unittest.mock import patch

import pytest
from click.testing import CliRunner

from gsa_api.cli.main import cli


@pytest.fixture
def gsa_command(tmp_path: Path) -> Path:
    script = tmp_path / "gsa_ok.sh"
    script.write_text("""#!/bin/sh
while [ $# -gt 0 ]; do
  case "$1" in
    --out) out="$2"; shift 2 ;;
    *) shift ;;
  esac
done
printf 'exp\\tp\\tobs\\texp\\tadj\\teff\\n' > "$out.tsv"
printf 'E-TABM-90_A-AFFY-2:x:y:g4_g3\\t0.01\\t5\\t2\\t0.02\\t1.5\\n' >> "$out.tsv"
""")
    os.chmod(script, 0o755)
    return script


@pytest.fixture
def test_config(tmp_path: Path, gsa_command: Path) -> Path:
    """Create minimal config YAML plus data directory for testing."""
    data_dir = tmp_path / "data"
    data_dir.mkdir()
    (data_dir / "arabidopsis_thaliana.po").write_text("db\n")
    (data_dir / "contrastTitles.tsv").write_text(
        "E-TABM-90\tg4_g3\t'wild type' vs 'mutant'\n"
    )

    config_path = tmp_path / "test_config.yaml"
    config_path.write_text(f"""
data_dir: {data_dir}
working_dir: {tmp_path}/work
log_dir: {tmp_path}/logs

gsa:
  command: {gsa_command}
  pvalue: 0.05
  cores: 2

server:
  port: 3005
  workers: 2
""")
    return config_path


def test_help():
    runner = CliRunner()
    result = runner.invoke(cli, ['--help'])

    assert result.exit_code == 0
    for command in ['info', 'serve', 'organisms', 'title', 'enrich']:
        assert command in result.output


def test_info(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'info'])

    assert result.exit_code == 0
    assert "Config Hash:" in result.output
    assert "Cores:           2" in result.output
    assert "3005" in result.output


def test_organisms(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'organisms'])

    assert result.exit_code == 0
    assert result.output == "arabidopsis_thaliana\n"


def test_title(test_config):
    runner = CliRunner()

    found = runner.invoke(cli, ['--config', str(test_config), 'title', 'E-TABM-90', 'g4_g3'])
    missing = runner.invoke(cli, ['--config', str(test_config), 'title', 'E-TABM-90', 'g1_g2'])

    assert found.exit_code == 0
    assert found.output == "'wild type' vs 'mutant'\n"
    assert missing.exit_code == 0
    assert missing.output == "\n"


def test_title_invalid_accession(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, ['--config', str(test_config), 'title', 'E-TABM-90;x', 'g4_g3'])

    assert result.exit_code == 2
    assert "EXPACC: Invalid experiment accession" in result.output


def test_enrich_tsv(test_config, tmp_path):
    runner = CliRunner()
    result = runner.invoke(cli, [
        '--config', str(test_config),
        'enrich', 'arabidopsis_thaliana', 'AT1G48030', 'AT2G17130',
    ])

    assert result.exit_code == 0, result.output
    assert "# 'AT1G48030 AT2G17130'" in result.output
    assert "E-TABM-90\tg4_g3\t0.01" in result.output
    assert list((tmp_path / "work").iterdir()) == []


def test_enrich_json(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, [
        '--config', str(test_config),
        'enrich', '--format', 'json', 'arabidopsis_thaliana', 'AT1G48030',
    ])

    assert result.exit_code == 0, result.output
    records = json.loads(result.stdout)
    assert records[0]["COMPARISON_TITLE"] == "'wild type' vs 'mutant'"


def test_enrich_unknown_organism(test_config):
    runner = CliRunner()
    result = runner.invoke(cli, [
        '--config', str(test_config),
        'enrich', 'homo_sapiens', 'BRCA1',
    ])

    assert result.exit_code == 1


def test_serve_passes_settings_to_uvicorn(test_config):
    runner = CliRunner()

    with patch("gsa_api.cli.serve_cmd.uvicorn.run") as mock_run, \
            patch.dict(os.environ, {}, clear=False):
        result = runner.invoke(cli, [
            '--config', str(test_config), 'serve', '--port', '4000',
        ])
        assert os.environ["GSA_API_CONFIG"] == str(test_config)

    assert result.exit_code == 0, result.output
    mock_run.assert_called_once()
    args, kwargs = mock_run.call_args
    assert args[0] == "gsa_api.api.app:create_app_from_env"
    assert kwargs["factory"] is True
    assert kwargs["port"] == 4000
    assert kwargs["workers"] == 2
