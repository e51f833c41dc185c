"""
Matplotlib-based visualization for the spring-mesh simulation.
"""

from typing import List, Dict, Optional, Any, Tuple
import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.collections import LineCollection
from matplotlib.patches import Circle as MPLCircle
import logging
from .engine import World

logger = logging.getLogger(__name__)


class Visualizer:
    """Real-time view of a world; drives World.step from an animation timer."""

    def __init__(self, world: World, figsize: Tuple[int, int] = (10, 8)):
        """
        Initialize visualizer.

        Axes match the simulation area in screen coordinates, with y
        growing downwards.

        Args:
            world: World to visualize
            figsize: Figure size (width, height)
        """
        self.world = world
        self.fig, self.ax = plt.subplots(figsize=figsize)
        self.ax.set_xlim(0, world.config.width)
        self.ax.set_ylim(world.config.height, 0)
        self.ax.set_aspect('equal')

        self.real_time = True
        self.show_stats = True

        self.node_patches: Dict[int, MPLCircle] = {}
        self.spring_lines = LineCollection([], colors='black', linewidths=1)
        self.ax.add_collection(self.spring_lines)

        self.animation = None
        self.stats_text = self.ax.text(0.02, 0.98, "", transform=self.ax.transAxes,
                                       verticalalignment='top', fontfamily='monospace')

        logger.info("Visualizer initialized")

    def update_frame(self, frame_num: int = 0) -> List:
        """Step the world (in real-time mode) and redraw nodes and springs."""
        if self.real_time:
            self.world.step()

        self.spring_lines.set_segments(self.world.spring_segments())
        artists: List[Any] = [self.spring_lines]

        positions = self.world.node_positions()
        for index, position in enumerate(positions):
            if index not in self.node_patches:
                self.node_patches[index] = self._create_patch()
                self.ax.add_patch(self.node_patches[index])
            patch = self.node_patches[index]
            patch.center = (position[0], position[1])
            artists.append(patch)

        # Patches for nodes dropped by World.clear
        for index in [i for i in self.node_patches if i >= len(positions)]:
            self.node_patches.pop(index).remove()

        if self.show_stats:
            self._update_stats()
            artists.append(self.stats_text)

        return artists

    def _create_patch(self) -> MPLCircle:
        # Drawn one unit smaller than the collision radius so neighbours stay distinct
        radius = max(self.world.config.node_radius - 1, 0.5)
        return MPLCircle((0, 0), radius, facecolor='red', edgecolor='black')

    def _update_stats(self) -> None:
        """Update statistics display."""
        info = self.world.get_debug_info()
        self.stats_text.set_text(
            f"Time: {info['time']:.2f}s\n"
            f"Nodes: {info['node_count']}  Springs: {info['spring_count']}\n"
            f"Collisions: {info['collision_count']}\n"
            f"Energy: {info['kinetic_energy']:.2f}"
        )

    def animate(self, interval: Optional[float] = None) -> None:
        """Start real-time animation, one step per frame at the world's time step."""
        if interval is None:
            interval = 1000 * self.world.config.dt

        self.animation = animation.FuncAnimation(
            self.fig, self.update_frame, interval=interval,
            blit=False, cache_frame_data=False
        )
        plt.show()

    def render_frame(self, save_path: Optional[str] = None) -> None:
        """Render a single frame."""
        self.update_frame()
        if save_path:
            self.fig.savefig(save_path, dpi=150, bbox_inches='tight')
            logger.info(f"Saved frame to {save_path}")
        else:
            plt.show()

    def close(self) -> None:
        """Close visualization."""
        if self.animation:
            self.animation.event_source.stop()
        plt.close(self.fig)
