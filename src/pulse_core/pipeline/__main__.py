"""Allow running the pipeline as: python -m pulse_core.pipeline [--config path] [--ticks N]."""

import argparse

from pulse_core.pipeline.runner import main


def cli() -> None:
    parser = argparse.ArgumentParser(description="Opportunity detection pipeline")
    parser.add_argument("--config", default=None, help="Path to config.yaml")
    parser.add_argument("--ticks", type=int, default=None, help="Stop after N snapshots")
    args = parser.parse_args()
    main(config_path=args.config, max_ticks=args.ticks)


if __name__ == "__main__":
    cli()
