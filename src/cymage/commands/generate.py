"""Generate command implementation."""

from pathlib import Path
from typing import Annotated

import typer

from ..config import ConfigError, CymageConfig, get_config_dir, load_config
from ..output import OutputContext, get_output_context
from ..pipeline import InvalidInputError, RunPlan, prepare_run, read_plan, run_generation
from ..services import GenerationError, PreflightError, check_host, make_generator


def _print_dry_run(
    ctx: OutputContext, run_plan: RunPlan, output: Path, config: CymageConfig
) -> None:
    ctx.console.print("[cyan][DRY RUN][/cyan] Would generate Cypress test:")
    ctx.console.print(f"  Output: {output}")
    ctx.console.print(f"  Backend: {config.backend.provider} ({config.backend.model})")
    ctx.console.print(f"  Step groups: {len(run_plan.step_groups)}")
    ctx.console.print(f"  References: {len(run_plan.references)}")
    for reference in run_plan.references:
        status = "" if reference.is_resolved else " [yellow](unresolved)[/yellow]"
        ctx.console.print(f"    {reference.path}{status}")
    ctx.console.print("\n[cyan][DRY RUN][/cyan] Batches:")
    for batch in run_plan.batches:
        if batch.step_group is not None:
            unit = f"steps {', '.join(str(n) for n in batch.step_group.numbers)}"
        else:
            unit = "whole plan"
        files = ", ".join(ref.path for ref in batch.references) or "no files"
        ctx.console.print(f"  {batch.index}. {batch.kind.value}: {unit} [{files}]")


def generate(
    bug: Annotated[str, typer.Option("--bug", "-b", help="Bug number (e.g., 39802)")],
    test_plan: Annotated[
        Path | None,
        typer.Option("--test-plan", "-t", help="Path to file containing test plan"),
    ] = None,
    text: Annotated[
        str | None,
        typer.Option("--text", help="Test plan as inline text"),
    ] = None,
    output: Annotated[
        Path | None,
        typer.Option("--output", "-o", help="Output spec file path"),
    ] = None,
    provider: Annotated[
        str | None,
        typer.Option("--provider", "-p", help="API provider: 'github' or 'openai'"),
    ] = None,
    model: Annotated[
        str | None,
        typer.Option("--model", "-m", help="Model to use (e.g., gpt-4o)"),
    ] = None,
    host: Annotated[
        str | None,
        typer.Option("--host", help="Koha staff interface URL"),
    ] = None,
    koha_path: Annotated[
        Path | None,
        typer.Option("--koha-path", envvar="KOHA_PATH", help="Koha checkout used for references"),
    ] = None,
    skip_host_check: Annotated[
        bool,
        typer.Option("--skip-host-check", help="Do not check that the Koha host is reachable"),
    ] = False,
) -> None:
    """Generate a Cypress test from a Koha bug test plan.

    If --output is not specified, writes to
    <koha-path>/t/cypress/integration/Generated/Bug<NUMBER>_spec.ts
    """
    ctx = get_output_context()

    try:
        plan_text = read_plan(test_plan, text)
    except InvalidInputError as e:
        ctx.error(str(e))
        raise typer.Exit(1) from None

    try:
        config = load_config(get_config_dir(Path.cwd())).with_overrides(
            provider=provider, model=model, host=host, koha_path=koha_path
        )
        config.backend.get_provider()
    except ConfigError as e:
        ctx.error(str(e))
        raise typer.Exit(2) from None

    output = output or config.default_output_path(bug)

    if ctx.dry_run:
        _print_dry_run(ctx, prepare_run(plan_text, config), output, config)
        return

    try:
        generate_fn = make_generator(config.backend)
    except ConfigError as e:
        ctx.error(str(e))
        token_env = config.backend.get_provider().token_env
        ctx.print(f"  export {token_env}=your_token")
        raise typer.Exit(2) from None

    if not skip_host_check:
        try:
            check_host(config.koha.host)
        except PreflightError as e:
            ctx.error(str(e))
            raise typer.Exit(3) from None

    try:
        result = run_generation(plan_text, bug, output, config, generate_fn)
    except GenerationError as e:
        ctx.error(f"Generation failed: {e}")
        raise typer.Exit(12) from None

    ctx.success(
        "Cypress test generated successfully!",
        data={
            "output": str(result.output_path),
            "batches": result.batches,
            "step_groups": result.step_groups,
            "references": [ref.path for ref in result.references],
        },
    )
    ctx.print(f"[green]File: {result.output_path}[/green]")
    ctx.print("")
    ctx.progress("To run the test:")
    ctx.print(f"  cd {config.koha.path}")
    ctx.print("  npm run cypress open")
    ctx.print("  # or")
    ctx.print(f'  npm run cypress run -- --spec "{result.output_path}"')
