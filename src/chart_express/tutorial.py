"""Tutorial content: verbose altair next to the shorthand API.

Every section pairs a chart written with the full altair builder API with
the same chart written with `chart_express`. The literate notebook in
`docs/tutorial.py` narrates these sections; `export_tutorial` renders
them all, which doubles as a check that every example still builds.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Union

import altair as alt

from chart_express import charts, datasets, specialized
from chart_express.config import ExpressConfig, resolve_config
from chart_express.errors import UnknownSectionError
from chart_express.render import save_chart, spec_summary, to_spec

logger = logging.getLogger(__name__)

Builder = Callable[[ExpressConfig], Any]


@dataclass(frozen=True)
class Section:
    """One tutorial cell pair."""

    slug: str
    title: str
    prose: str
    shorthand: Builder
    verbose: Optional[Builder] = None


# --- scatter -----------------------------------------------------------------


def _scatter_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.iris())
        .mark_point()
        .encode(
            x=alt.X("sepalLength:Q"),
            y=alt.Y("sepalWidth:Q"),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _scatter_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return charts.scatter(datasets.iris(), x="sepalLength", y="sepalWidth", config=cfg)


def _scatter_color_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.iris())
        .mark_point()
        .encode(
            x=alt.X("sepalLength:Q", scale=alt.Scale(zero=False)),
            y=alt.Y("sepalWidth:Q", scale=alt.Scale(zero=False)),
            color=alt.Color("species:N"),
            tooltip=[alt.Tooltip("species:N"), alt.Tooltip("petalLength:Q")],
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _scatter_color_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return charts.scatter(
        datasets.iris(),
        x="sepalLength",
        y="sepalWidth",
        color="species",
        tooltip=["species", "petalLength"],
        opts={"x": {"scale": {"zero": False}}, "y": {"scale": {"zero": False}}},
        config=cfg,
    )


# --- line / bar / hist ---------------------------------------------------------


def _line_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.fuels())
        .mark_line()
        .encode(
            x=alt.X("year:T"),
            y=alt.Y("net_generation:Q", title="Net generation (GWh)"),
            color=alt.Color("source:N"),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _line_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return charts.line(
        datasets.fuels(),
        x="year:T",
        y="net_generation",
        color="source",
        opts={"y": {"title": "Net generation (GWh)"}},
        config=cfg,
    )


def _bar_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.scores())
        .mark_bar()
        .encode(
            x=alt.X("category:N", title="Category"),
            y=alt.Y("mean(score):Q", title="Mean score"),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _bar_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return charts.bar(
        datasets.scores(),
        x="category",
        y="mean(score)",
        opts={"x": {"title": "Category"}, "y": {"title": "Mean score"}},
        config=cfg,
    )


def _hist_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.iris())
        .mark_bar(opacity=cfg.histogram_opacity, binSpacing=0)
        .encode(
            x=alt.X("petalLength:Q", bin=alt.Bin(maxbins=cfg.maxbins)),
            y=alt.Y("count():Q", stack=None),
            color=alt.Color("species:N"),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _hist_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return charts.hist(datasets.iris(), x="petalLength", color="species", config=cfg)


# --- specialized helpers ----------------------------------------------------------


def _heatmap_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.scores())
        .mark_rect()
        .encode(
            x=alt.X("category:N"),
            y=alt.Y("group:N"),
            color=alt.Color("score:Q", scale=alt.Scale(scheme=cfg.color_scheme)),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _heatmap_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return specialized.heatmap(
        datasets.scores(), x="category", y="group", color="score", config=cfg
    )


def _correlation_verbose(cfg: ExpressConfig) -> alt.LayerChart:
    source = datasets.iris_correlation()
    low, high = float(source["correlation"].min()), float(source["correlation"].max())
    midpoint = (low + high) / 2
    base = alt.Chart(source).encode(x=alt.X("column:N"), y=alt.Y("row:N"))
    rects = base.mark_rect().encode(
        color=alt.Color("correlation:Q", scale=alt.Scale(scheme=cfg.color_scheme))
    )
    labels = base.mark_text(baseline="middle").encode(
        text=alt.Text("correlation:Q", format=cfg.annotation_format),
        color=alt.condition(
            f'datum["correlation"] < {midpoint!r}', alt.value("white"), alt.value("black")
        ),
    )
    return alt.layer(rects, labels).properties(width=cfg.width, height=cfg.height)


def _correlation_shorthand(cfg: ExpressConfig) -> alt.LayerChart:
    return specialized.heatmap(
        datasets.iris_correlation(),
        x="column",
        y="row",
        color="correlation",
        annotate=True,
        config=cfg,
    )


def _density_verbose(cfg: ExpressConfig) -> alt.Chart:
    return (
        alt.Chart(datasets.iris())
        .mark_rect()
        .encode(
            x=alt.X("sepalLength:Q", bin=alt.Bin(maxbins=cfg.maxbins)),
            y=alt.Y("sepalWidth:Q", bin=alt.Bin(maxbins=cfg.maxbins)),
            color=alt.Color("count():Q", scale=alt.Scale(scheme=cfg.color_scheme)),
        )
        .properties(width=cfg.width, height=cfg.height)
    )


def _density_shorthand(cfg: ExpressConfig) -> alt.Chart:
    return specialized.density_heatmap(
        datasets.iris(), x="sepalLength", y="sepalWidth", config=cfg
    )


def _jointplot_verbose(cfg: ExpressConfig) -> alt.VConcatChart:
    source = datasets.iris()
    x_extent = [float(source["sepalLength"].min()), float(source["sepalLength"].max())]
    y_extent = [float(source["sepalWidth"].min()), float(source["sepalWidth"].max())]
    hidden = alt.Axis(labels=False, ticks=False, domain=False, title=None)
    bars = {"opacity": cfg.histogram_opacity, "binSpacing": 0}
    base = alt.Chart(source)

    points = base.mark_point().encode(
        x=alt.X("sepalLength:Q", scale=alt.Scale(domain=x_extent)),
        y=alt.Y("sepalWidth:Q", scale=alt.Scale(domain=y_extent)),
        color=alt.Color("species:N"),
    ).properties(width=cfg.width, height=cfg.height)

    top = base.mark_bar(**bars).encode(
        x=alt.X(
            "sepalLength:Q",
            bin=alt.Bin(maxbins=cfg.maxbins, extent=x_extent),
            axis=hidden,
        ),
        y=alt.Y("count():Q", stack=None, title=None),
        color=alt.Color("species:N"),
    ).properties(width=cfg.width, height=cfg.marginal_size)

    right = base.mark_bar(**bars).encode(
        x=alt.X("count():Q", stack=None, title=None),
        y=alt.Y(
            "sepalWidth:Q",
            bin=alt.Bin(maxbins=cfg.maxbins, extent=y_extent),
            axis=hidden,
        ),
        color=alt.Color("species:N"),
    ).properties(width=cfg.marginal_size, height=cfg.height)

    return alt.vconcat(
        top,
        alt.hconcat(points, right, spacing=cfg.spacing),
        spacing=cfg.spacing,
    )


def _jointplot_shorthand(cfg: ExpressConfig) -> alt.VConcatChart:
    return specialized.jointplot(
        datasets.iris(), x="sepalLength", y="sepalWidth", color="species", config=cfg
    )


def _jointplot_density_shorthand(cfg: ExpressConfig) -> alt.VConcatChart:
    return specialized.jointplot(
        datasets.iris(),
        x="petalLength",
        y="petalWidth",
        kind="density_heatmap",
        bins=15,
        config=cfg,
    )


SECTIONS: List[Section] = [
    Section(
        slug="scatter",
        title="Scatter plots",
        prose=(
            "A scatter plot needs a mark and two position encodings. The shorthand "
            "infers the quantitative type of both iris measures from the DataFrame."
        ),
        verbose=_scatter_verbose,
        shorthand=_scatter_shorthand,
    ),
    Section(
        slug="scatter_color",
        title="Color, tooltips and per-channel options",
        prose=(
            "Extra channels are plain keyword arguments. Channel properties that "
            "the verbose API passes to alt.X or alt.Color go into `opts`, keyed "
            "by channel."
        ),
        verbose=_scatter_color_verbose,
        shorthand=_scatter_color_shorthand,
    ),
    Section(
        slug="line",
        title="Line charts over time",
        prose=(
            "Explicit types still work: `year:T` forces a temporal axis. The fuels "
            "data has one line per generation source."
        ),
        verbose=_line_verbose,
        shorthand=_line_shorthand,
    ),
    Section(
        slug="bar",
        title="Aggregated bar charts",
        prose="Aggregates use the familiar `mean(field)` shorthand.",
        verbose=_bar_verbose,
        shorthand=_bar_shorthand,
    ),
    Section(
        slug="hist",
        title="Histograms",
        prose=(
            "`hist` bins the x field and counts records. With a color channel the "
            "groups are drawn unstacked and translucent."
        ),
        verbose=_hist_verbose,
        shorthand=_hist_shorthand,
    ),
    Section(
        slug="heatmap",
        title="Heatmaps",
        prose="A heatmap is a rect mark over two categorical axes with a color scale.",
        verbose=_heatmap_verbose,
        shorthand=_heatmap_shorthand,
    ),
    Section(
        slug="correlation",
        title="Annotated correlation heatmap",
        prose=(
            "With `annotate=True` the heatmap gains a text layer. Label color flips "
            "at the middle of the value range, so the spec is a two-layer chart."
        ),
        verbose=_correlation_verbose,
        shorthand=_correlation_shorthand,
    ),
    Section(
        slug="density_heatmap",
        title="Density heatmaps",
        prose="Binning both axes and counting records gives a 2D histogram.",
        verbose=_density_verbose,
        shorthand=_density_shorthand,
    ),
    Section(
        slug="jointplot",
        title="Jointplots",
        prose=(
            "A jointplot concatenates three views: a top histogram as wide as the "
            "scatter, and a right histogram as tall as it. Extents are shared so "
            "the marginal bins line up with the central axes."
        ),
        verbose=_jointplot_verbose,
        shorthand=_jointplot_shorthand,
    ),
    Section(
        slug="jointplot_density",
        title="Jointplots with a density center",
        prose="`kind='density_heatmap'` swaps the central scatter for a 2D histogram.",
        shorthand=_jointplot_density_shorthand,
    ),
]


def get_section(slug: str) -> Section:
    """Return a section by slug.

    Raises:
        UnknownSectionError: If no section has that slug.
    """
    for section in SECTIONS:
        if section.slug == slug:
            return section
    raise UnknownSectionError(
        f"Unknown tutorial section '{slug}'",
        {"slug": slug, "valid": [s.slug for s in SECTIONS]},
    )


def build_section(
    section: Union[Section, str], config: Optional[ExpressConfig] = None
) -> Dict[str, Any]:
    """Build the shorthand and (when present) verbose charts of a section."""
    if isinstance(section, str):
        section = get_section(section)
    cfg = resolve_config(config)
    return {
        "shorthand": section.shorthand(cfg),
        "verbose": section.verbose(cfg) if section.verbose is not None else None,
    }


def export_tutorial(
    out_dir: Union[str, Path],
    config: Optional[ExpressConfig] = None,
    fmt: str = ".json",
) -> List[Path]:
    """Render every section into `out_dir` and write an `index.json`.

    Returns:
        Paths written, index last.
    """
    out_dir = Path(out_dir)
    out_dir.mkdir(parents=True, exist_ok=True)
    written: List[Path] = []
    index = []

    for section in SECTIONS:
        built = build_section(section, config)
        written.append(save_chart(built["shorthand"], out_dir / f"{section.slug}{fmt}"))
        if built["verbose"] is not None:
            written.append(
                save_chart(built["verbose"], out_dir / f"{section.slug}.verbose{fmt}")
            )
        index.append(
            {
                "slug": section.slug,
                "title": section.title,
                "has_verbose": built["verbose"] is not None,
                "summary": spec_summary(to_spec(built["shorthand"])),
            }
        )

    index_path = out_dir / "index.json"
    with open(index_path, "w") as f:
        json.dump(index, f, indent=2)
    written.append(index_path)

    logger.info("Exported %d tutorial sections to %s", len(SECTIONS), out_dir)
    return written
