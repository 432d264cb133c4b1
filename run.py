"""
One-button runner for the reference state experiments.

Usage:
    python run.py

    # Reproducible run into a results directory:
    python run.py --seed 42 --output-dir results

    # Smaller tiers for a quick look:
    python run.py --quick

Runs the ordered interval and the scattered union back to back and
writes {power}_ordered.out / {power}_random.out, one estimate per line.
"""

import argparse
import logging

from state_mc.experiment import run_reference_experiments

# Defaults: edit these if your file layout changes
DEFAULT_OUTPUT_DIR = "."
QUICK_PRESETS = ("ordered_quick", "scattered_quick")
FULL_PRESETS = ("ordered", "scattered")


def main():
    parser = argparse.ArgumentParser(
        description="Run the ordered and scattered state experiments"
    )
    parser.add_argument(
        "--output-dir", "-o", default=DEFAULT_OUTPUT_DIR,
        help=f"Directory for result files (default: {DEFAULT_OUTPUT_DIR})"
    )
    parser.add_argument(
        "--seed", type=int, default=None,
        help="Root seed (default: OS entropy)"
    )
    parser.add_argument(
        "--quick", action="store_true",
        help="Use the quick presets (tiers up to 10^4, 50 calls each)"
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    presets = QUICK_PRESETS if args.quick else FULL_PRESETS
    print(f"Experiments: {', '.join(presets)}")
    print(f"Output: {args.output_dir}")
    print(f"Seed: {args.seed if args.seed is not None else 'OS entropy'}")
    print()

    results = run_reference_experiments(
        output_dir=args.output_dir,
        seed=args.seed,
        presets=presets,
    )

    print("\n" + "=" * 60)
    print("RESULTS")
    print("=" * 60)
    for name, result in results.items():
        meta = result['metadata']
        print(f"\n  {name} (exact {meta['true_probability']:.6f}, entropy {meta['entropy']}):")
        print(result['summary'][['sample_count', 'mean', 'mean_abs_error', 'expected_std_error']]
              .to_string(index=False))


if __name__ == '__main__':
    main()
