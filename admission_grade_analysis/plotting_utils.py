# plotting_utils.py

import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns


def plot_histogram(ax, series, bins=30, xlabel="", ylabel="Frequency", title=""):
    ax.hist(series.dropna(), bins=bins, color='coral', edgecolor='black')
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)


def plot_histogram_grid(df, columns, bin_counts, titles=None):
    """
    2x2 grid of histograms, one per column, each using its own bin count.
    Returns the Figure.
    """
    fig, axes = plt.subplots(2, 2, figsize=(10, 8))
    for ax, col in zip(axes.flat, columns):
        plot_histogram(
            ax,
            df[col],
            bins=bin_counts.get(col, 30),
            xlabel=col.replace('_', ' ').title(),
            title=(titles or {}).get(col, f"Distribution of {col}"),
        )
    # unused panels (fewer than 4 columns)
    for ax in list(axes.flat)[len(columns):]:
        ax.axis('off')
    fig.tight_layout()
    return fig


def plot_scatter_with_fit(x, y, fit, xlabel="", ylabel="", title="", square_x=False):
    """
    Scatter of (x, y) with the fitted line of a RegressionResult.

    square_x=True draws the single-term quadratic fit as a curve over the
    unsquared x axis (fit.predict is fed x**2).
    """
    fig, ax = plt.subplots(figsize=(6, 4))
    ax.scatter(x, y, s=10, alpha=0.6)
    xs = np.linspace(np.nanmin(x), np.nanmax(x), 100)
    ys = fit.predict(xs ** 2 if square_x else xs)
    ax.plot(xs, ys, color="red", linewidth=2,
            label=f"{fit.kind} fit (R² = {fit.r_squared:.3f})")
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.legend()
    fig.tight_layout()
    return fig


def plot_subgroup_trends(df, comparison, x, y, xlabel="", ylabel="", title=""):
    """
    Scatter coloured by the subgroup key with one fitted line per level
    plus a dashed overall trend. Fits that are None are left out.
    """
    key = comparison.key
    levels = [level for level, _ in comparison.groups]
    palette = dict(zip(levels, sns.color_palette("Set1", n_colors=len(levels))))

    fig, ax = plt.subplots(figsize=(7, 5))
    sns.scatterplot(
        data=df, x=x, y=y, hue=key, hue_order=levels,
        palette=palette, s=12, alpha=0.5, ax=ax,
    )
    xs = np.linspace(df[x].min(), df[x].max(), 100)
    for level, fit in comparison.groups:
        if fit is None:
            continue
        ax.plot(xs, fit.predict(xs), color=palette[level], linewidth=2,
                label=f"{level}: slope {fit.slope:.3f}")
    overall = comparison.overall
    if overall is not None:
        ax.plot(xs, overall.predict(xs), color="black", linestyle="--",
                linewidth=1.5, label=f"overall: slope {overall.slope:.3f}")
    ax.set_xlabel(xlabel)
    ax.set_ylabel(ylabel)
    ax.set_title(title)
    ax.legend(fontsize=8)
    fig.tight_layout()
    return fig
