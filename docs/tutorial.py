# %% [markdown]
# # chart-express tutorial
#
# altair builds Vega-Lite charts from a mark, an encoding per channel and a
# data source. That is flexible but wordy: most everyday charts repeat the
# same `alt.Chart(...).mark_*().encode(alt.X(...), ...)` scaffolding.
# `chart_express` is a thin shorthand layer over it. Every call returns a
# regular altair chart, so anything altair can do is still one method away.
#
# Each section shows the verbose altair version first, then the shorthand.

# %%
import altair as alt

import chart_express as cx
from chart_express import datasets

iris = datasets.iris()
fuels = datasets.fuels()
scores = datasets.scores()

# %% [markdown]
# ## Scatter plots
#
# The verbose version spells out the mark, the channel classes and the field
# types:

# %%
alt.Chart(iris).mark_point().encode(
    x=alt.X("sepalLength:Q"),
    y=alt.Y("sepalWidth:Q"),
)

# %% [markdown]
# The shorthand infers `:Q` from the DataFrame dtypes:

# %%
cx.scatter(iris, x="sepalLength", y="sepalWidth")

# %% [markdown]
# ## Extra channels and per-channel options
#
# Channels are keyword arguments. Anything you would pass to `alt.X(...)` or
# `alt.Color(...)` goes into `opts`, keyed by channel name.

# %%
alt.Chart(iris).mark_point().encode(
    x=alt.X("sepalLength:Q", scale=alt.Scale(zero=False)),
    y=alt.Y("sepalWidth:Q", scale=alt.Scale(zero=False)),
    color=alt.Color("species:N"),
    tooltip=[alt.Tooltip("species:N"), alt.Tooltip("petalLength:Q")],
)

# %%
cx.scatter(
    iris,
    x="sepalLength",
    y="sepalWidth",
    color="species",
    tooltip=["species", "petalLength"],
    opts={"x": {"scale": {"zero": False}}, "y": {"scale": {"zero": False}}},
)

# %% [markdown]
# ## Lines, bars and aggregates
#
# Explicit types are still accepted (`year:T`), and so are aggregates
# (`mean(score)`, `count()`).

# %%
cx.line(fuels, x="year:T", y="net_generation", color="source")

# %%
alt.Chart(scores).mark_bar().encode(
    x=alt.X("category:N", title="Category"),
    y=alt.Y("mean(score):Q", title="Mean score"),
)

# %%
cx.bar(
    scores,
    x="category",
    y="mean(score)",
    opts={"x": {"title": "Category"}, "y": {"title": "Mean score"}},
)

# %% [markdown]
# ## Histograms
#
# `hist` bins `x` and counts records. Colored histograms overlap instead of
# stacking.

# %%
cx.hist(iris, x="petalLength", color="species", bins=30)

# %% [markdown]
# ## Specialized plots
#
# ### Heatmap
#
# A heatmap is a rect mark over two discrete axes:

# %%
cx.heatmap(scores, x="category", y="group", color="score")

# %% [markdown]
# ### Annotated correlation heatmap
#
# Correlation matrices are usually square and wide; `tidy_matrix` melts them
# into the long form charts expect. `annotate=True` layers the values on top
# of the cells, switching label color at the middle of the range.

# %%
matrix = iris[datasets.IRIS_MEASURES].corr()
correlation = cx.tidy_matrix(matrix, value_name="correlation")
cx.heatmap(correlation, x="column", y="row", color="correlation", annotate=True)

# %% [markdown]
# ### Density heatmap
#
# Binning both axes and coloring by `count()` gives a 2D histogram.

# %%
cx.density_heatmap(iris, x="sepalLength", y="sepalWidth", bins=25)

# %% [markdown]
# ### Jointplot
#
# A jointplot puts marginal histograms above and to the right of the central
# chart. The top histogram is as wide as the center and `marginal_size`
# tall; the right one is `marginal_size` wide and as tall as the center.

# %%
cx.jointplot(iris, x="sepalLength", y="sepalWidth", color="species")

# %%
cx.jointplot(
    iris,
    x="petalLength",
    y="petalWidth",
    kind="density_heatmap",
    marginal_size=80,
    spacing=10,
)

# %% [markdown]
# ## Configuration
#
# Defaults such as sizes and bin counts come from `ExpressConfig`. Use a
# preset, a YAML/JSON file or `CHART_EXPRESS_*` environment variables, and
# activate it globally or for a block:

# %%
with cx.use_config(cx.ExpressConfig.preset("compact")):
    small = cx.scatter(iris, x="petalLength", y="petalWidth")
small
