import pstats
from pathlib import Path

from typer.testing import CliRunner

from pyprofile.cli.main import app
from pyprofile.instrument import instrument, parse_source

PROGRAM = """
import helpers


def main():
    print(helpers.greeting())


if __name__ == "__main__":
    main()
"""

HELPERS = """
def greeting():
    return "abc"
"""

STANDALONE = """
def main():
    print("abc")


if __name__ == "__main__":
    main()
"""


def _profiled_functions(path: Path):
    stats = pstats.Stats(str(path))
    return {name for (_, _, name) in stats.stats}


def test_archive_writes_profile(workspace_factory, run_archive):
    root = (
        workspace_factory.with_source("app/prog.py", PROGRAM)
        .with_source("app/helpers.py", HELPERS)
        .build()
    )

    result = CliRunner().invoke(app, ["app/prog.py", "app/helpers.py"])
    assert result.exit_code == 0, result.output

    archive = root / "prog.profile.pyz"
    assert archive.is_file()

    run = run_archive(archive, root)
    assert run.returncode == 0, run.stderr
    assert run.stdout == "abc\n"

    profile = root / "prog.prof"
    assert profile.is_file()
    assert "greeting" in _profiled_functions(profile)
    # The sources themselves were not modified.
    assert "cProfile" not in (root / "app/prog.py").read_text()


def test_package_with_main_module(workspace_factory, run_archive):
    root = (
        workspace_factory.with_source("mypkg/__init__.py", "")
        .with_source(
            "mypkg/__main__.py",
            """
            from mypkg.helpers import greeting


            def main():
                print(greeting())


            if __name__ == "__main__":
                main()
            """,
        )
        .with_source("mypkg/helpers.py", HELPERS)
        .build()
    )

    result = CliRunner().invoke(app, ["mypkg", "-o", "dist/tool.pyz", "-p", "tool.prof"])
    assert result.exit_code == 0, result.output

    run = run_archive(root / "dist" / "tool.pyz", root)
    assert run.returncode == 0, run.stderr
    assert run.stdout == "abc\n"
    assert "greeting" in _profiled_functions(root / "tool.prof")


def test_unwritable_profile_is_reported_at_runtime(workspace_factory, run_archive):
    root = workspace_factory.with_source("prog.py", STANDALONE).build()

    result = CliRunner().invoke(app, ["prog.py", "-p", "missing/dir/out.prof"])
    assert result.exit_code == 0, result.output

    run = run_archive(root / "prog.profile.pyz", root)
    assert run.returncode == 0
    assert run.stdout == ""
    assert run.stderr.startswith("Couldn't open missing/dir/out.prof: ")
    assert not (root / "missing").exists()


def test_profile_lands_where_it_was_opened(workspace_factory, run_archive):
    root = workspace_factory.with_source(
        "prog.py",
        """
        import os


        def busy():
            return sum(range(1000))


        def main():
            os.makedirs("elsewhere", exist_ok=True)
            os.chdir("elsewhere")
            print(busy())


        if __name__ == "__main__":
            main()
        """,
    ).build()

    result = CliRunner().invoke(app, ["prog.py", "-p", "out.prof"])
    assert result.exit_code == 0, result.output

    run = run_archive(root / "prog.profile.pyz", root)
    assert run.returncode == 0, run.stderr
    assert "busy" in _profiled_functions(root / "out.prof")
    assert not (root / "elsewhere" / "out.prof").exists()


def test_profile_is_written_when_main_raises(workspace_factory, run_archive):
    root = workspace_factory.with_source(
        "prog.py",
        """
        def explode():
            raise RuntimeError("boom")


        def main():
            explode()


        if __name__ == "__main__":
            main()
        """,
    ).build()

    result = CliRunner().invoke(app, ["prog.py"])
    assert result.exit_code == 0, result.output

    run = run_archive(root / "prog.profile.pyz", root)
    assert run.returncode != 0
    assert "RuntimeError: boom" in run.stderr
    assert "explode" in _profiled_functions(root / "prog.prof")


def test_twice_instrumented_program_still_runs(workspace_factory, run_archive):
    root = workspace_factory.with_source(
        "prog.py",
        """
        def busy():
            return sum(range(1000))


        def main():
            print(busy())


        if __name__ == "__main__":
            main()
        """,
    ).build()
    tree = parse_source(root / "prog.py")
    instrument(tree, "twice.prof")
    instrument(tree, "twice.prof")
    (root / "prog.py").write_text(tree.code)

    run = run_archive(root / "prog.py", root)

    assert run.returncode == 0, run.stderr
    assert run.stdout == "499500\n"
    # Which of the two profilers saw busy() depends on whether the interpreter
    # allows a second active profiler; either way the file must load.
    pstats.Stats(str(root / "twice.prof"))
