import typer

from cec_test_server.cli.query import query_app
from cec_test_server.cli.serve import serve

app = typer.Typer(
    name="cec-test-server",
    help="CEC Test Server: preview templates and content from a local toolkit project.",
    no_args_is_help=True,
    context_settings={"help_option_names": ["-h", "--help"]},
)

app.command("serve")(serve)
app.add_typer(query_app, name="query")


def main() -> None:
    app()
