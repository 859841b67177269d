from pyprofile.cli.rendering import PREFIX, CliRenderer


def test_debug_only_when_verbose(capsys):
    CliRenderer(verbose=False).render("hidden", "debug")
    CliRenderer(verbose=True).render("shown", "debug")

    assert capsys.readouterr().err == f"{PREFIX}shown\n"


def test_info_lines_stay_bare(capsys):
    CliRenderer().render("PYPROFILEWORK='/tmp/work'", "info")

    captured = capsys.readouterr()
    assert captured.err == "PYPROFILEWORK='/tmp/work'\n"
    assert captured.out == ""


def test_other_levels_carry_the_program_name(capsys):
    renderer = CliRenderer()
    renderer.render("Fatal: boom", "error")
    renderer.render("Warning: careful", "warning")
    renderer.render("done", "success")

    assert capsys.readouterr().err.splitlines() == [
        "pyprofile: Fatal: boom",
        "pyprofile: Warning: careful",
        "pyprofile: done",
    ]
