import json
import pytest
import toml
from pathlib import Path
from click.testing import CliRunner

from filesearch import __version__
from filesearch.cli.interface import main_cli_group

from conftest import create_project_structure

@pytest.fixture
def runner():
    return CliRunner()

def read_listing(output_file: Path, root: Path) -> set:
    resolved_root = root.resolve()
    return {
        Path(line).relative_to(resolved_root).as_posix()
        for line in output_file.read_text(encoding="utf-8").splitlines()
    }

def test_cli_extension_filter_to_file(runner: CliRunner, sample_project: Path, tmp_path: Path):
    out = tmp_path / "out.txt"
    result = runner.invoke(main_cli_group, [str(sample_project), "-x", "py", "-o", str(out)], catch_exceptions=False)

    assert result.exit_code == 0
    assert read_listing(out, sample_project) == {"src/main.py", "src/util.py"}

def test_cli_name_and_exclude_dir(runner: CliRunner, sample_project: Path, tmp_path: Path):
    out = tmp_path / "out.txt"
    result = runner.invoke(
        main_cli_group,
        [str(sample_project), "-x", ".TXT", "-e", str(sample_project / "skip"), "-o", str(out)],
        catch_exceptions=False,
    )
    assert result.exit_code == 0
    assert read_listing(out, sample_project) == {"keep/f1.txt", "keep/deep/notes.TXT"}

def test_cli_json_format(runner: CliRunner, sample_project: Path, tmp_path: Path):
    out = tmp_path / "out.json"
    result = runner.invoke(main_cli_group, [str(sample_project), "-n", "f1", "-n", "f2", "-F", "json", "-o", str(out)])

    assert result.exit_code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["count"] == 2
    assert {Path(p).name for p in payload["files"]} == {"f1.txt", "f2.txt"}
    assert payload["inaccessible_count"] == 0

def test_cli_bracketed_format_on_stdout(runner: CliRunner, abc_tree: Path):
    result = runner.invoke(main_cli_group, [str(abc_tree), "-n", "b", "-F", "bracketed"])
    assert result.exit_code == 0
    assert f"[{(abc_tree / 'b.txt').resolve()}]" in result.output

def test_cli_defaults_to_current_directory(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        create_project_structure(Path(td), {"one.txt": "1", "nested/two.txt": "2", "three.md": "3"})
        result = runner.invoke(main_cli_group, ["-x", "txt"], catch_exceptions=False)

        assert result.exit_code == 0
        assert str(Path(td).resolve() / "one.txt") in result.output
        assert str(Path(td).resolve() / "nested" / "two.txt") in result.output
        assert "three.md" not in result.output

def test_cli_summary_reports_counts(runner: CliRunner, abc_tree: Path):
    result = runner.invoke(main_cli_group, [str(abc_tree), "-x", "txt", "--summary"])
    assert result.exit_code == 0
    assert "Files matched" in result.output
    assert "Inaccessible paths" in result.output

def test_cli_missing_root_exits_cleanly(runner: CliRunner, tmp_path: Path):
    out = tmp_path / "out.json"
    result = runner.invoke(main_cli_group, [str(tmp_path / "absent"), "-F", "json", "-o", str(out)])

    assert result.exit_code == 0
    payload = json.loads(out.read_text(encoding="utf-8"))
    assert payload["files"] == []
    assert payload["inaccessible_count"] == 1

def test_cli_unwritable_output_is_an_error(runner: CliRunner, abc_tree: Path, tmp_path: Path):
    result = runner.invoke(main_cli_group, [str(abc_tree), "-o", str(tmp_path / "no-such-dir" / "out.txt")])
    assert result.exit_code == 1
    assert "Error:" in result.output

def test_cli_profile_from_project_config(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        root = Path(td)
        create_project_structure(root, {"docs/guide.md": "g", "docs/api.rst": "a", "build/gen.md": "x", "app.py": "p"})
        (root / ".filesearch.toml").write_text(
            '[profiles.docs]\nincluded_extensions = ["md", "rst"]\nexcluded_dirs = ["build"]\n'
        )
        result = runner.invoke(main_cli_group, ["--config-profile", "docs", "-o", "found.txt"], catch_exceptions=False)

        assert result.exit_code == 0
        assert read_listing(root / "found.txt", root) == {"docs/guide.md", "docs/api.rst"}

def test_cli_flags_override_profile(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        root = Path(td)
        create_project_structure(root, {"a.md": "a", "b.py": "b"})
        (root / ".filesearch.toml").write_text('[profiles.docs]\nincluded_extensions = ["md"]\n')
        result = runner.invoke(main_cli_group, ["--config-profile", "docs", "-x", "py", "-o", "found.txt"])

        assert result.exit_code == 0
        assert read_listing(root / "found.txt", root) == {"b.py"}

def test_cli_save_profile_and_exit(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        root = Path(td)
        (root / "a.py").write_text("a")
        result = runner.invoke(main_cli_group, ["-x", "py", "-e", "venv", "--save", "pyonly"], catch_exceptions=False)

        assert result.exit_code == 0
        saved = toml.load(root / ".filesearch.toml")
        assert saved["profiles"]["pyonly"]["included_extensions"] == ["py"]
        assert saved["profiles"]["pyonly"]["excluded_dirs"] == ["venv"]
        assert str((root / "a.py").resolve()) not in result.output

def test_cli_version(runner: CliRunner):
    result = runner.invoke(main_cli_group, ["--version"])
    assert result.exit_code == 0
    assert __version__ in result.output

def test_cli_verbose_json_logs(runner: CliRunner, abc_tree: Path, tmp_path: Path):
    out = tmp_path / "out.txt"
    result = runner.invoke(main_cli_group, [str(abc_tree), "-vv", "--force-json-logs", "-o", str(out)])
    assert result.exit_code == 0
    assert read_listing(out, abc_tree) == {"a.txt", "a.md", "b.txt"}

def test_cli_save_into_unreadable_config_reports_error(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        (Path(td) / ".filesearch.toml").mkdir()
        result = runner.invoke(main_cli_group, ["-x", "py", "--save", "p"])

        assert result.exit_code == 1
        assert "Error:" in result.output

def test_cli_wrongly_shaped_config_reports_error(runner: CliRunner):
    with runner.isolated_filesystem() as td:
        (Path(td) / ".filesearch.toml").write_text("root = 5\n")
        result = runner.invoke(main_cli_group, [])

        assert result.exit_code == 1
        assert "Error:" in result.output
        assert "root" in result.output
