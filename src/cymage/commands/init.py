"""Init command implementation."""

from pathlib import Path

from ..config import get_config_dir, write_config_template
from ..output import get_output_context


def init() -> None:
    """Write a cymage config template in the current directory."""
    ctx = get_output_context()

    config_dir = get_config_dir(Path.cwd())
    config_path = config_dir / "config.toml"

    if ctx.dry_run:
        ctx.console.print("[cyan][DRY RUN][/cyan] Would initialize cymage:")
        if config_path.exists():
            ctx.console.print(f"  Config already exists: {config_path}")
        else:
            ctx.console.print(f"  Create config: {config_path}")
        return

    if config_path.exists():
        ctx.notice(f"Config already exists: {config_path}")
        return

    write_config_template(config_dir)
    ctx.success(f"Created config template: {config_path}", data={"config": str(config_path)})
