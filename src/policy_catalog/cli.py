"""CLI for the funding policy catalog."""

import json
import sys
from pathlib import Path

import click
from rich.console import Console
from rich.table import Table

from .catalog import PolicyCatalog
from .checklist import build_sections
from .config import find_config_file, load_config, save_default_config
from .municipalities import get_municipality_profile, list_municipalities


console = Console()


def _load_catalog(config: Path) -> PolicyCatalog:
    """Load the catalog from an explicit config, a discovered one, or defaults."""
    config_path = config or find_config_file()
    if config_path:
        load_config(config_path)
    return PolicyCatalog()


@click.group()
@click.version_option(version="0.1.0", prog_name="policy-catalog")
def main():
    """IPA III Policy Catalog.

    Inspect the funding window table and municipality reference profiles
    used by the grant assessor.
    """
    pass


@main.command()
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, path_type=Path),
    help='Path to policy catalog YAML file'
)
def windows(config: Path):
    """List the funding windows with their pass thresholds and budget ranges."""
    try:
        catalog = _load_catalog(config)
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    table = Table(title="IPA III Windows", show_header=True, header_style="bold")
    table.add_column("Window", style="cyan")
    table.add_column("Label")
    table.add_column("Threshold", justify="right")
    table.add_column("Budget (min-max)", justify="right")
    table.add_column("Avg", justify="right")

    for window_id in catalog.window_ids:
        policy = catalog.get_window(window_id)
        budget = policy.budget_range
        table.add_row(
            window_id,
            policy.profile.label,
            f"{policy.profile.threshold:g}",
            f"€{budget.min:,.0f} - €{budget.max:,.0f}",
            f"€{budget.avg:,.0f}",
        )

    console.print(table)
    console.print(f"\nDefault window: [bold]{catalog.default_window}[/bold]")


@main.command()
@click.argument('window')
@click.option(
    '--config', '-c',
    type=click.Path(exists=True, path_type=Path),
    help='Path to policy catalog YAML file'
)
@click.option(
    '--json-output', '-j',
    is_flag=True,
    help='Output the window policy as JSON'
)
def inspect(window: str, config: Path, json_output: bool):
    """Show the full policy of one window.

    Unknown windows show the default compliance profile.

    Example:
        policy-catalog inspect window3
    """
    try:
        catalog = _load_catalog(config)
    except Exception as e:
        console.print(f"[red]Error loading config:[/red] {e}")
        sys.exit(1)

    policy = catalog.get_window(window)
    profile = catalog.get_profile(window)

    if json_output:
        data = policy.model_dump(mode="json") if policy else {"profile": profile.model_dump(mode="json")}
        click.echo(json.dumps(data, indent=2))
        return

    if policy is None:
        console.print(f"[yellow]Unknown window '{window}', showing default profile[/yellow]")

    console.print(f"\n[bold]{profile.label}[/bold] ({profile.window})")
    console.print(f"Pass threshold: {profile.threshold:g}")

    table = Table(title="Checklist Sections", show_header=True, header_style="bold")
    table.add_column("Section", style="cyan")
    table.add_column("Weight", justify="right")
    table.add_column("Threshold", justify="right")
    table.add_column("Items", justify="right")
    for section in build_sections(profile):
        table.add_row(
            section.label,
            f"{section.weight:.3f}",
            f"{section.threshold:g}",
            str(len(section.items)),
        )
    console.print(table)

    if policy is None:
        return

    console.print(f"\n[bold]Priority:[/bold] {policy.priority.title}")
    console.print(f"  Key areas: {', '.join(policy.priority.key_areas)}")
    console.print(f"  Alignment keywords: {', '.join(policy.alignment_keywords)}")
    console.print(f"  Synergy keywords: {', '.join(policy.synergy_keywords)}")

    ratios = Table(title="Budget Breakdown", show_header=True, header_style="bold")
    ratios.add_column("Category", style="cyan")
    ratios.add_column("Share", justify="right")
    for category, ratio in policy.breakdown.as_dict().items():
        ratios.add_row(category.value, f"{ratio:.0%}")
    console.print(ratios)


@main.command()
@click.argument('name', required=False)
@click.option(
    '--json-output', '-j',
    is_flag=True,
    help='Output profiles as JSON'
)
def municipalities(name: str, json_output: bool):
    """List known municipalities, or show one profile by NAME."""
    if name:
        profile = get_municipality_profile(name)
        if profile is None:
            console.print(f"[red]Error:[/red] Unknown municipality: {name}")
            sys.exit(1)
        profiles = [profile]
    else:
        profiles = list_municipalities()

    if json_output:
        click.echo(json.dumps([p.model_dump(mode="json") for p in profiles], indent=2, ensure_ascii=False))
        return

    table = Table(title="Municipality Profiles", show_header=True, header_style="bold")
    table.add_column("Name", style="cyan")
    table.add_column("Country")
    table.add_column("Population", justify="right")
    table.add_column("GDP/capita", justify="right")
    table.add_column("EU compliance", justify="right")
    for profile in profiles:
        table.add_row(
            profile.name,
            profile.country,
            f"{profile.population:,}",
            f"€{profile.economic_profile.gdp_per_capita:,.0f}",
            f"{profile.governance.eu_compliance_level}/10",
        )
    console.print(table)


@main.command(name='init-config')
@click.option(
    '--out', '-o',
    type=click.Path(path_type=Path),
    default='policy-catalog.yaml',
    help='Output path for the configuration file'
)
@click.option(
    '--force', '-f',
    is_flag=True,
    help='Overwrite existing config file'
)
def init_config(out: Path, force: bool):
    """Generate a default policy catalog file.

    Example:
        policy-catalog init-config --out my-catalog.yaml
    """
    if out.exists() and not force:
        console.print(f"[red]Error:[/red] Config file already exists: {out}")
        console.print("Use --force to overwrite")
        sys.exit(1)

    try:
        save_default_config(out)
        console.print(f"[green]✓[/green] Config file created: {out}")
        console.print("\nEdit this file to customize:")
        console.print("  • windows.<id>.profile - Pass thresholds and section overrides")
        console.print("  • windows.<id>.alignment_keywords - Validator alignment keywords")
        console.print("  • windows.<id>.budget_range - Typical budget range")
        console.print("  • windows.<id>.breakdown - Budget category ratios")
    except Exception as e:
        console.print(f"[red]Error creating config:[/red] {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
