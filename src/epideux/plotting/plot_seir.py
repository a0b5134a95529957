"""
Plots the SEIR timeline of a simulation.
"""
import matplotlib
matplotlib.use("Agg")
from matplotlib import pyplot as plt

from epideux.utils.constants import SEIR_STATES


def plot_seir(timeline, path=None, title="SEIR"):
    """
    Plots one curve per SEIR compartment against the report timestamps.

    Args:
        timeline (epideux.log.track.SeirTimeline): reports to plot
        path (str | Path, optional): where to save the figure. Not saved if None.
        title (str): title of the figure

    Returns:
        matplotlib.figure.Figure: the figure
    """
    fig, ax = plt.subplots(figsize=(7.5, 7.5))
    for state in SEIR_STATES:
        ax.plot(timeline.timestamps, getattr(timeline, state), label=state.capitalize())
    ax.legend()
    ax.set_ylabel("Number of persons")
    ax.set_xlabel("Date")
    ax.set_title(title)
    fig.autofmt_xdate(rotation=45)
    if path is not None:
        fig.savefig(path)
    return fig
