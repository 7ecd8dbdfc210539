"""
Tests for network and summary figures
"""

import numpy as np
import pytest
from matplotlib.collections import LineCollection
from matplotlib.figure import Figure

from pyfesl import (compute_residency, individual_summary, population_summary, network_summary,
                    network_plot, abacus_plot, detections_by_fish_plot, durations_by_fish_plot)
from pyfesl.plotting import _scale_widths


def line_collections(fig):
    return [c for c in fig.axes[0].collections if isinstance(c, LineCollection)]


@pytest.mark.unit
class TestNetworkPlot:

    def test_returns_figure(self, sample_detections):
        fig = network_plot(network_summary(sample_detections), title='F1 and F2')

        assert isinstance(fig, Figure)
        assert fig.axes[0].get_title() == 'F1 and F2'
        assert len(line_collections(fig)[0].get_segments()) == 3

    def test_min_traffic_filters_edges(self, sample_detections):
        fig = network_plot(network_summary(sample_detections), min_traffic=2)
        assert line_collections(fig) == []

    def test_labels(self, sample_detections):
        fig = network_plot(network_summary(sample_detections), labels=True)
        texts = [t.get_text() for t in fig.axes[0].texts]
        assert sorted(texts) == ['A', 'B', 'C']

    def test_scale_widths(self):
        np.testing.assert_allclose(_scale_widths([1, 2, 3], 0.5, 2.5), [0.5, 1.5, 2.5])
        np.testing.assert_allclose(_scale_widths([4, 4], 0.5, 2.5), [1.5, 1.5])


@pytest.mark.unit
class TestSummaryPlots:

    def test_abacus_plot(self, sample_detections):
        individual = individual_summary(sample_detections, compute_residency(sample_detections))
        fig = abacus_plot(population_summary(individual))

        labels = [t.get_text() for t in fig.axes[0].get_yticklabels()]
        # ordered by longitude, west to east
        assert labels == ['A', 'B', 'C']

    def test_detections_by_fish(self, sample_detections):
        fig = detections_by_fish_plot(sample_detections)
        widths = [bar.get_width() for bar in fig.axes[0].patches]
        assert widths == [4, 6]

    def test_durations_by_fish(self, sample_detections):
        fig = durations_by_fish_plot(sample_detections)
        widths = [bar.get_width() for bar in fig.axes[0].patches]
        assert widths == [1.0, 1.0]
