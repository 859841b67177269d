from pyprofile.cli.main import app

app(prog_name="pyprofile")
