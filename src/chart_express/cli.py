"""CLI entrypoint for chart-express."""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, List, Optional

from chart_express import charts, datasets, specialized
from chart_express.config import ConfigPreset, ExpressConfig, set_config
from chart_express.data import to_table
from chart_express.errors import ChartExpressError, InvalidOptionError
from chart_express.render import save_chart, spec_summary, to_spec
from chart_express.tutorial import export_tutorial

logger = logging.getLogger(__name__)

SIMPLE_KINDS = ("scatter", "point", "line", "area", "bar", "tick", "boxplot")
PLOT_KINDS = SIMPLE_KINDS + ("hist", "heatmap", "density_heatmap", "jointplot")


def resolve_config(args: argparse.Namespace) -> ExpressConfig:
    """Resolve configuration from --config, --preset or the environment."""
    if getattr(args, "config", None):
        return ExpressConfig.from_file(args.config)
    if getattr(args, "preset", None):
        return ExpressConfig.preset(args.preset)
    return ExpressConfig.from_env()


def load_data(source: str) -> Any:
    """Resolve --data as a bundled dataset name, a local file or a URL."""
    if source in datasets.names():
        return datasets.load(source)
    return to_table(source)


def build_plot(args: argparse.Namespace, config: ExpressConfig) -> Any:
    """Build the chart requested by the `plot` subcommand."""
    data = load_data(args.data)
    common = {"width": args.width, "height": args.height, "title": args.title, "config": config}

    if args.kind != "hist" and args.y is None:
        raise InvalidOptionError(f"'{args.kind}' needs --y")

    if args.kind == "hist":
        return charts.hist(data, x=args.x, color=args.color, bins=args.bins, **common)
    if args.kind == "heatmap":
        if args.color is None:
            raise InvalidOptionError("'heatmap' needs --color")
        return specialized.heatmap(
            data, x=args.x, y=args.y, color=args.color, annotate=args.annotate, **common
        )
    if args.kind == "density_heatmap":
        return specialized.density_heatmap(data, x=args.x, y=args.y, bins=args.bins, **common)
    if args.kind == "jointplot":
        return specialized.jointplot(
            data,
            x=args.x,
            y=args.y,
            color=args.color,
            kind=args.joint_kind,
            bins=args.bins,
            **common,
        )

    builder = getattr(charts, args.kind)
    return builder(data, x=args.x, y=args.y, color=args.color, **common)


def cmd_plot(args: argparse.Namespace) -> int:
    """Build a single chart and print or save it."""
    try:
        config = resolve_config(args)
        set_config(config)
        chart = build_plot(args, config)
        if args.out:
            path = save_chart(chart, args.out)
            print(f"Wrote {args.kind} chart to {path}")
        else:
            print(json.dumps(to_spec(chart), indent=2))
        return 0
    except (ChartExpressError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1


def cmd_tutorial(args: argparse.Namespace) -> int:
    """Export every tutorial section."""
    try:
        config = resolve_config(args)
        set_config(config)
        paths = export_tutorial(args.out, config=config, fmt=f".{args.format}")
    except (ChartExpressError, FileNotFoundError, ValueError) as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    with open(paths[-1]) as f:
        index = json.load(f)

    print("\n" + "=" * 50)
    print("TUTORIAL EXPORT SUMMARY")
    print("=" * 50)
    print(f"Output Directory: {args.out}")
    print(f"Files Written:    {len(paths)}")
    print("-" * 50)
    for entry in index:
        summary = entry["summary"]
        print(f"- {entry['slug']:20} {summary['kind']:8} {', '.join(summary['marks'])}")
    print("=" * 50 + "\n")
    return 0


def cmd_datasets(args: argparse.Namespace) -> int:
    """List the bundled datasets or write them as CSV files."""
    if args.out:
        out_dir = Path(args.out)
        out_dir.mkdir(parents=True, exist_ok=True)
        for name in datasets.names():
            path = out_dir / f"{name}.csv"
            datasets.load(name).to_csv(path, index=False)
            logger.info("Wrote %s", path)
        print(f"Exported {len(datasets.names())} datasets to {out_dir}")
        return 0

    for name in datasets.names():
        frame = datasets.load(name)
        print(f"{name:18} {len(frame):>5} rows  columns: {', '.join(map(str, frame.columns))}")
    return 0


def cmd_describe(args: argparse.Namespace) -> int:
    """Summarize a saved Vega-Lite JSON spec."""
    path = Path(args.spec)
    if not path.exists():
        print(f"Error: Spec file not found: {path}", file=sys.stderr)
        return 1
    try:
        with open(path) as f:
            spec = json.load(f)
        summary = spec_summary(spec)
    except json.JSONDecodeError as e:
        print(f"Error: {path} is not valid JSON: {e}", file=sys.stderr)
        return 1
    except ChartExpressError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1
    print(json.dumps(summary, indent=2))
    return 0


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    group = parser.add_mutually_exclusive_group()
    group.add_argument(
        "--config",
        metavar="PATH",
        help="Path to a chart configuration file (YAML or JSON)",
    )
    group.add_argument(
        "--preset",
        choices=[p.value for p in ConfigPreset],
        help="Use a built-in sizing preset",
    )


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the CLI."""
    parser = argparse.ArgumentParser(
        prog="chart-express",
        description="Shorthand Vega-Lite charts and the chart-express tutorial",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    subparsers = parser.add_subparsers(dest="command", required=True)

    # plot subcommand
    plot_parser = subparsers.add_parser("plot", help="Build one chart from shorthand")
    plot_parser.add_argument("kind", choices=PLOT_KINDS, help="Chart kind")
    plot_parser.add_argument(
        "--data",
        required=True,
        metavar="SOURCE",
        help=f"Dataset name ({', '.join(datasets.names())}), file path or URL",
    )
    plot_parser.add_argument("--x", required=True, metavar="FIELD", help="x field shorthand")
    plot_parser.add_argument("--y", metavar="FIELD", help="y field shorthand")
    plot_parser.add_argument("--color", metavar="FIELD", help="color field shorthand")
    plot_parser.add_argument("--bins", type=int, metavar="N", help="Maximum bins")
    plot_parser.add_argument(
        "--annotate", action="store_true", help="Print values on heatmap cells"
    )
    plot_parser.add_argument(
        "--joint-kind",
        choices=list(specialized.JOINTPLOT_KINDS),
        default="scatter",
        help="Central panel of a jointplot (default: scatter)",
    )
    plot_parser.add_argument("--title", help="Chart title")
    plot_parser.add_argument("--width", type=int, help="Chart width in pixels")
    plot_parser.add_argument("--height", type=int, help="Chart height in pixels")
    plot_parser.add_argument(
        "--out",
        metavar="PATH",
        help="Write the chart to a .json or .html file instead of printing the spec",
    )
    _add_config_arguments(plot_parser)
    plot_parser.set_defaults(func=cmd_plot)

    # tutorial subcommand
    tut_parser = subparsers.add_parser("tutorial", help="Export every tutorial example")
    tut_parser.add_argument(
        "--out", required=True, metavar="DIR", help="Output directory for the specs"
    )
    tut_parser.add_argument(
        "--format", choices=["json", "html"], default="json", help="Export format"
    )
    _add_config_arguments(tut_parser)
    tut_parser.set_defaults(func=cmd_tutorial)

    # datasets subcommand
    data_parser = subparsers.add_parser("datasets", help="List or export example datasets")
    data_parser.add_argument("--out", metavar="DIR", help="Write each dataset as CSV")
    data_parser.set_defaults(func=cmd_datasets)

    # describe subcommand
    desc_parser = subparsers.add_parser("describe", help="Summarize a saved Vega-Lite spec")
    desc_parser.add_argument("spec", metavar="PATH", help="Path to a .json spec")
    desc_parser.set_defaults(func=cmd_describe)

    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """Run the CLI entrypoint."""
    parser = build_parser()
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    return args.func(args)


if __name__ == "__main__":
    sys.exit(main())
