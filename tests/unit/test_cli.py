import ast
from argparse import Namespace

import pytest

from iterwrap.cli import _resolve_output_dir, _resolve_subjects, _resolve_verbosity, main, module_file_name
from iterwrap.config import IterwrapConfig


@pytest.fixture
def isolated(tmp_path, monkeypatch):
    """Run the CLI from an empty directory with no ITERWRAP_* variables."""
    for name in ("ITERWRAP_SUBJECTS", "ITERWRAP_OUTPUT_DIR", "ITERWRAP_VERBOSITY"):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    return tmp_path


def run(argv: list[str]) -> int:
    with pytest.raises(SystemExit) as excinfo:
        main(argv)
    return excinfo.value.code


@pytest.mark.parametrize(
    ("class_name", "expected"),
    [
        ("FooSubjectIteratingWrapper", "foo_subject_iterating_wrapper.py"),
        ("HTTPSubjectIteratingWrapper", "http_subject_iterating_wrapper.py"),
        ("Int2SubjectIteratingWrapper", "int2_subject_iterating_wrapper.py"),
    ],
)
def test_module_file_name(class_name, expected):
    assert module_file_name(class_name) == expected


class TestResolveOptions:
    """Command-line options take precedence over configuration."""

    def _make_args(self, **kwargs) -> Namespace:
        defaults = {"subjects": [], "output_dir": None, "verbose": 0, "quiet": 0}
        defaults.update(kwargs)
        return Namespace(**defaults)

    def test_subjects(self):
        config = IterwrapConfig(subjects=["a:A"])

        assert _resolve_subjects(self._make_args(), config) == ["a:A"]
        assert _resolve_subjects(self._make_args(subjects=["b:B"]), config) == ["b:B"]

    def test_output_dir(self):
        config = IterwrapConfig(output_dir="from_config")

        assert str(_resolve_output_dir(self._make_args(), config)) == "from_config"
        assert str(_resolve_output_dir(self._make_args(output_dir="cli"), config)) == "cli"
        assert _resolve_output_dir(self._make_args(), IterwrapConfig()) is None

    def test_verbosity(self):
        config = IterwrapConfig(verbosity=1)

        assert _resolve_verbosity(self._make_args(verbose=2), config) == 3
        assert _resolve_verbosity(self._make_args(quiet=2), config) == -1


class TestGenerateCommand:
    def test_writes_source_to_stdout(self, isolated, capsys):
        assert run(["generate", "sample_subjects:FooSubject"]) == 0

        out = capsys.readouterr().out
        assert "class FooSubjectIteratingWrapper(FooSubject):" in out
        ast.parse(out)

    def test_writes_module_files(self, isolated):
        output_dir = isolated / "generated"

        code = run(["generate", "sample_subjects:FooSubject", "sample_subjects.BarSubject", "-o", str(output_dir)])

        assert code == 0
        assert (output_dir / "foo_subject_iterating_wrapper.py").is_file()
        assert "class BarSubjectIteratingWrapper" in (output_dir / "bar_subject_iterating_wrapper.py").read_text()

    def test_subjects_from_pyproject(self, isolated, capsys):
        (isolated / "pyproject.toml").write_text('[tool.iterwrap]\nsubjects = ["sample_subjects:EmptySubject"]\n')

        assert run(["generate"]) == 0
        assert "class EmptySubjectIteratingWrapper(EmptySubject):" in capsys.readouterr().out

    def test_no_subjects(self, isolated, capsys):
        assert run(["generate"]) == 1
        assert "No subjects" in capsys.readouterr().out

    def test_undescribable_subject(self, isolated, capsys):
        assert run(["generate", "sample_subjects:RawSubject"]) == 1
        assert "RawSubject" in capsys.readouterr().out

    def test_invalid_config_exits_2(self, isolated):
        (isolated / "pyproject.toml").write_text("[tool.iterwrap]\nunknown = 1\n")
        assert run(["generate", "sample_subjects:FooSubject"]) == 2


class TestDescribeCommand:
    def test_lists_methods(self, isolated, capsys):
        assert run(["describe", "sample_subjects:FooSubject"]) == 0
        assert "check" in capsys.readouterr().out

    def test_unknown_module(self, isolated):
        assert run(["describe", "no_such_module_here:FooSubject"]) == 1


class TestEmitCommand:
    def test_emits_from_json(self, isolated, capsys, foo_descriptor):
        path = isolated / "foo.json"
        path.write_text(foo_descriptor.model_dump_json(indent=2))

        assert run(["emit", str(path)]) == 0

        out = capsys.readouterr().out
        assert "    def check(self, arg0: str) -> None:" in out

    def test_invalid_descriptor(self, isolated):
        path = isolated / "broken.json"
        path.write_text('{"package": "pkg"}')

        assert run(["emit", str(path)]) == 1

    def test_missing_descriptor(self, isolated):
        assert run(["emit", str(isolated / "missing.json")]) == 1


def test_no_command_prints_help(isolated, capsys):
    assert run([]) == 0
    assert "usage: iterwrap" in capsys.readouterr().out
