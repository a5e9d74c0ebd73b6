import click
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from glstack.cli.ensure import Ensure
from glstack.cli.json_output import emit_json
from glstack.cli.json_schemas import stack_list_response
from glstack.cli.output import user_output
from glstack.core.context import GlstackContext
from glstack.core.gitlab.parsing import merge_request_iid_from_url
from glstack.core.stack.current import load_current_stack
from glstack.core.stack.errors import StackError
from glstack.core.stack.store import StackStore
from glstack.core.stack.types import StackRef


def _format_merge_request(ref: StackRef) -> str:
    if not ref.mr:
        return "[dim]-[/dim]"
    iid = merge_request_iid_from_url(ref.mr)
    label = f"!{iid}" if iid is not None else ref.mr
    return f"[link={ref.mr}]{label}[/link]"


@click.command("list")
@click.option("--json", "output_json", is_flag=True, help="Print the stack as JSON on stdout.")
@click.pass_obj
def list_cmd(ctx: GlstackContext, output_json: bool) -> None:
    """List the diffs of the current stack, from first to last."""
    repo = Ensure.in_repo(ctx)
    store = StackStore(repo.stacks_dir)
    try:
        stack = load_current_stack(ctx.git, store, repo.root)
    except StackError as e:
        user_output(click.style("Error: ", fg="red") + str(e))
        raise SystemExit(1) from e

    current_branch = ctx.git.get_current_branch(repo.root)
    base_branch = store.read_base_branch(stack.title)

    if output_json:
        response = stack_list_response(stack, base_branch, current_branch)
        emit_json(response.model_dump(mode="json"))
        return

    if stack.is_empty():
        user_output(f'Stack "{stack.title}" is empty. Save a diff with `glstack stack save`.')
        return

    table = Table(show_header=True, header_style="bold", title=f"Stack: {stack.title}")
    table.add_column("", no_wrap=True)
    table.add_column("#", justify="right", no_wrap=True)
    table.add_column("branch", style="cyan", no_wrap=True)
    table.add_column("description")
    table.add_column("mr", no_wrap=True)

    for index, ref in enumerate(stack.refs_in_order(), start=1):
        marker = "[green]*[/green]" if ref.branch == current_branch else ""
        table.add_row(
            marker,
            str(index),
            escape(ref.branch),
            escape(ref.subject()),
            _format_merge_request(ref),
        )

    console = Console(stderr=True, width=200)
    console.print(table)
