from prettytest.cli import app

app(prog_name="prettytest")
