from valuestore.cli import app

app(prog_name="valuestore")
