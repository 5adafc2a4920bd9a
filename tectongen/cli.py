"""Click CLI commands for the tecton generator."""

import dataclasses
import json
import logging
from typing import Optional

import click

from .config import config_to_dict, dump_config, load_config, validate_config
from .constants import LOG_FORMAT, LOG_LEVEL
from .elements import TemplateElementFactory
from .errors import TectonError
from .export import export_glb, export_stl
from .generator import Collaborators, generate
from .lattice import LatticeLayout
from .models import GenerationConfig
from .noise import SimplexNoiseField

logger = logging.getLogger(__name__)


@click.group()
@click.option('--log-level', default=LOG_LEVEL, show_default=True,
              type=click.Choice(['DEBUG', 'INFO', 'WARNING', 'ERROR'],
                                case_sensitive=False))
def cli(log_level: str):
    """Tecton lattice generator: noise-carved element fields merged by material."""
    logging.basicConfig(level=log_level.upper(), format=LOG_FORMAT)


def _load(config_path: Optional[str]) -> GenerationConfig:
    try:
        return load_config(config_path) if config_path else GenerationConfig()
    except TectonError as e:
        raise click.ClickException(str(e))


@cli.command('generate')
@click.argument('config_path', required=False, type=click.Path(exists=True, dir_okay=False))
@click.option('--output', '-o', default='tectons.glb', help='Output file path')
@click.option('--format', 'fmt', default='glb', type=click.Choice(['glb', 'stl']),
              help='Output format')
@click.option('--no-combine', is_flag=True, help='Keep per-element meshes')
@click.option('--material-seed', type=int, default=None)
@click.option('--jitter-seed', type=int, default=None)
@click.option('--explosion-seed', type=int, default=None)
@click.option('--noise-seed', type=int, default=None)
def generate_cmd(config_path: Optional[str], output: str, fmt: str,
                 no_combine: bool, material_seed, jitter_seed,
                 explosion_seed, noise_seed):
    """Generate a lattice from CONFIG_PATH (JSON) and export it."""
    config = _load(config_path)
    overrides = {name: value for name, value in (
        ('material_seed', material_seed), ('jitter_seed', jitter_seed),
        ('explosion_seed', explosion_seed), ('noise_seed', noise_seed),
    ) if value is not None}
    if no_combine:
        overrides['combine_meshes'] = False
    config = dataclasses.replace(config, **overrides)

    def _progress(pct, msg):
        click.echo(f"[{pct:3.0f}%] {msg}")

    try:
        result = generate(config, Collaborators(
            noise_field=SimplexNoiseField(),
            element_factory=TemplateElementFactory.unit_box()),
            progress_callback=_progress)
        if fmt == 'stl':
            path = export_stl(result, output)
        else:
            path = export_glb(result, output)
    except (TectonError, ValueError) as e:
        logger.error(f"Error generating lattice: {e}")
        raise click.ClickException(str(e))

    stats = result.stats
    click.echo(f"\n{'=' * 50}")
    click.echo(f"Placed {stats.survivors} of {stats.cells_visited} cells "
               f"(hole: {stats.skipped_by_hole}, noise: {stats.skipped_by_noise})")
    for group in result.groups:
        click.echo(f"  {group.name}: {group.source_count} parts, "
                   f"{group.vertex_count} vertices")
    if path is None:
        click.echo("\nNo elements survived; nothing written.")
    else:
        click.echo(f"\nOutput: {path}")
    click.echo(f"{'=' * 50}")


@cli.command('init-config')
@click.option('--output', '-o', default='tectons.json', help='Config file to write')
def init_config(output: str):
    """Write the default config as JSON."""
    path = dump_config(GenerationConfig(), output)
    click.echo(f"Wrote default config to {path}")


@cli.command('inspect')
@click.argument('config_path', type=click.Path(exists=True, dir_okay=False))
def inspect_cmd(config_path: str):
    """Print the clamped config and lattice layout without generating."""
    config = validate_config(_load(config_path))
    factory = TemplateElementFactory.unit_box()
    layout = LatticeLayout.from_config(config, factory.element_size)

    click.echo(json.dumps(config_to_dict(config), indent=2))
    click.echo(f"\nCells: {config.count_x * config.count_y * config.count_z}")
    click.echo(f"Cell size: {layout.cell_size.round(4).tolist()}")
    click.echo(f"Extents: {layout.extents.round(4).tolist()}")
    click.echo(f"Origin: {layout.origin.round(4).tolist()}")
    if config.carve_central_hole:
        click.echo(f"Clearing: radius {config.hole_radius} at "
                   f"{layout.clearing_center.round(4).tolist()} (XZ)")


if __name__ == '__main__':
    cli()
