"""
Plotting utilities for TSP-GA runs.
Creates convergence plots and tour maps.
"""

from typing import Dict, Optional, Sequence

import matplotlib.pyplot as plt
import seaborn as sns

from config import VIZ_CONFIG
from tsp_ga.models.city import City


class Plotter:
    """Creates plots for TSP-GA analysis."""

    def __init__(self, config: Optional[Dict] = None):
        """
        Initialize plotter.

        Args:
            config: Visualization configuration
        """
        self.config = config or VIZ_CONFIG.copy()

        plt.style.use('default')
        sns.set_palette("husl")

        self.fig_size = self.config['figure_size']
        self.dpi = self.config['dpi']
        self.font_size = self.config['font_size']

    def plot_convergence(self, convergence_data: Dict,
                         title: str = "GA Convergence",
                         save_path: Optional[str] = None) -> plt.Figure:
        """
        Plot tour length and population size over generations.

        Args:
            convergence_data: Output of ``GeneticAlgorithm.get_convergence_data``
            title: Plot title
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure
        """
        generations = convergence_data['generations']

        fig, (ax_fitness, ax_size) = plt.subplots(2, 1, figsize=self.fig_size, sharex=True)

        ax_fitness.plot(generations, convergence_data['best_fitness'], linewidth=2,
                        label='Best-ever length')
        ax_fitness.plot(generations, convergence_data['generation_best_fitness'], linewidth=1,
                        alpha=0.7, label='Generation best')
        ax_fitness.plot(generations, convergence_data['avg_fitness'], linewidth=1,
                        alpha=0.7, label='Average length')
        for generation in convergence_data.get('mutations', []):
            ax_fitness.axvline(generation, color='grey', linestyle=':', alpha=0.5)
        ax_fitness.set_ylabel('Tour length', fontsize=self.font_size)
        ax_fitness.grid(True, alpha=0.3)
        ax_fitness.legend()

        ax_size.plot(generations, convergence_data['population_size'], linewidth=2,
                     label='Population size')
        ax_size.set_xlabel('Generation', fontsize=self.font_size)
        ax_size.set_ylabel('Chromosomes', fontsize=self.font_size)
        ax_size.grid(True, alpha=0.3)
        ax_size.legend()

        fig.suptitle(title, fontsize=self.font_size + 2, fontweight='bold')
        fig.tight_layout()

        if save_path:
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig

    def plot_tour(self, cities: Sequence[City], tour: Sequence[int],
                  title: str = "Best Tour",
                  save_path: Optional[str] = None) -> plt.Figure:
        """
        Draw the closed tour over the city coordinates.

        Args:
            cities: All cities
            tour: City ids in visiting order
            title: Plot title
            save_path: Optional path to save plot

        Returns:
            Matplotlib figure
        """
        by_id = {city.id: city for city in cities}
        xs = [by_id[gene].x for gene in tour] + [by_id[tour[0]].x]
        ys = [by_id[gene].y for gene in tour] + [by_id[tour[0]].y]

        fig, ax = plt.subplots(figsize=self.fig_size)
        ax.plot(xs, ys, color=self.config['tour_color'], linewidth=self.config['line_width'],
                zorder=1)
        ax.scatter([c.x for c in cities], [c.y for c in cities], s=self.config['marker_size'],
                   color=self.config['city_color'], zorder=2)
        ax.scatter([xs[0]], [ys[0]], s=self.config['marker_size'] * 2,
                   color=self.config['start_color'], marker='s', zorder=3, label='Start')

        if len(cities) <= 100:
            for city in cities:
                ax.annotate(str(city.id), (city.x, city.y), fontsize=self.font_size - 4,
                            xytext=(3, 3), textcoords='offset points')

        ax.set_title(title, fontsize=self.font_size + 2, fontweight='bold')
        ax.set_aspect('equal', adjustable='datalim')
        ax.grid(True, alpha=0.3)
        ax.legend()

        if save_path:
            fig.savefig(save_path, dpi=self.dpi, bbox_inches='tight')

        return fig
