"""
Command-line interface for state_mc experiments.
"""

import click
import json
import logging
from dataclasses import replace

from .errors import InvalidArgument
from .config import load_experiment_from_json, EXPERIMENT_PRESETS
from .experiment import run_experiment


@click.command()
@click.option(
    '--preset', '-p',
    type=click.Choice(list(EXPERIMENT_PRESETS.keys())),
    default='ordered',
    help='Experiment preset (default: ordered)'
)
@click.option(
    '--config-file', '-c',
    type=click.Path(exists=True),
    help='Experiment configuration JSON file (overrides --preset)'
)
@click.option(
    '--bound', '-b',
    type=int,
    help='Sample energies from [-bound, bound] (overrides config)'
)
@click.option(
    '--base',
    type=int,
    help='Sample counts grow as base ** power (overrides config)'
)
@click.option(
    '--max-power',
    type=int,
    help='Largest tier exponent (overrides config)'
)
@click.option(
    '--n-calls', '-n',
    type=int,
    help='Estimates per tier (overrides config)'
)
@click.option(
    '--seed',
    type=int,
    help='Root seed for reproducibility (default: OS entropy)'
)
@click.option(
    '--output-dir', '-o',
    type=click.Path(file_okay=False),
    help='Directory for per-tier result files'
)
@click.option(
    '--json-output',
    type=click.Path(),
    help='Write summary and metadata JSON here'
)
@click.option(
    '--verbose/--quiet', '-v/-q',
    default=True,
    help='Verbose output'
)
def main(
    preset,
    config_file,
    bound,
    base,
    max_power,
    n_calls,
    seed,
    output_dir,
    json_output,
    verbose
):
    """
    Estimate state probabilities over geometrically growing sample counts.
    """
    if verbose:
        logging.basicConfig(
            level=logging.INFO,
            format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
        )

    if n_calls is not None and n_calls <= 0:
        raise click.BadParameter("n-calls must be a positive integer", param_hint="'--n-calls'")
    if max_power is not None and max_power < 0:
        raise click.BadParameter("max-power must be non-negative", param_hint="'--max-power'")
    if seed is not None and seed < 0:
        raise click.BadParameter("seed must be non-negative", param_hint="'--seed'")

    if config_file:
        try:
            config = load_experiment_from_json(config_file)
        except (KeyError, TypeError, json.JSONDecodeError, InvalidArgument) as e:
            raise click.BadParameter(f"invalid experiment config: {e}", param_hint="'--config-file'")
    else:
        config = EXPERIMENT_PRESETS[preset]

    overrides = {
        'bound': bound,
        'base': base,
        'max_power': max_power,
        'n_calls': n_calls,
    }
    overrides = {key: value for key, value in overrides.items() if value is not None}
    if overrides:
        try:
            config = replace(config, **overrides)
        except InvalidArgument as e:
            raise click.BadParameter(str(e))

    click.echo(f"Running experiment '{config.name}'...")
    click.echo(f"  State: {config.state_kind}")
    click.echo(f"  Range: [{-config.bound}, {config.bound}]")
    click.echo(f"  Tiers: {config.base}^0 .. {config.base}^{config.max_power}")
    click.echo(f"  Calls per tier: {config.n_calls}")
    if seed is not None:
        click.echo(f"  Seed: {seed}")

    results = run_experiment(config, output_dir=output_dir, seed=seed, verbose=verbose)
    meta = results['metadata']

    click.echo("\n" + "=" * 60)
    click.echo("CONVERGENCE")
    click.echo("=" * 60)
    click.echo(f"Exact probability: {meta['true_probability']:.6f}")
    click.echo(f"State: {meta['leaf_count']} leaves, depth {meta['depth']}")
    click.echo(f"Root entropy: {meta['entropy']}")
    click.echo("")
    for m in results['metrics']:
        click.echo(
            f"  n={m.sample_count:>9d}  mean={m.mean:.5f}  "
            f"|err|={m.mean_abs_error:.5f}  SE={m.expected_std_error:.5f}  "
            f"CI=[{m.ci_low:.5f}, {m.ci_high:.5f}]"
        )
    click.echo(f"\nConverging: {'yes' if results['converging'] else 'no'}")

    if results['files']:
        click.echo(f"\nResults written to {output_dir} ({len(results['files'])} files)")

    if json_output:
        output_data = {
            'metadata': meta,
            'converging': results['converging'],
            'tiers': [m.to_dict() for m in results['metrics']],
        }
        with open(json_output, 'w') as f:
            json.dump(output_data, f, indent=2, default=str)
        click.echo(f"Summary saved to {json_output}")


if __name__ == '__main__':
    main()
