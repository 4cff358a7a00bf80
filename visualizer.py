"""
visualizer.py — Live Density Viewer
====================================
Renders the 2D density field of a FluidSimulation, border ring included,
and lets you stir it with the mouse:
  - A continuous emitter near the bottom center blows smoke upward.
  - Click-and-drag injects density under the cursor and pushes velocity
    in the direction of the drag.

Uses matplotlib FuncAnimation for real-time updates.
"""

import logging

import matplotlib.pyplot as plt
import matplotlib.animation as animation
from matplotlib.colors import LinearSegmentedColormap

# Custom smoke colormap: black → orange → white
SMOKE_COLORS = ["#000000", "#1a0a00", "#ff6a00", "#ffffff"]
smoke_cmap = LinearSegmentedColormap.from_list("smoke", SMOKE_COLORS)

logger = logging.getLogger(__name__)

EMITTER_DENSITY = 100.0
EMITTER_VELOCITY = (0.0, 20.0)
MOUSE_DENSITY = 200.0
MOUSE_FORCE = 50.0


class FluidVisualizer:
    """
    Real-time viewer of the fluid simulation.

    Usage (standalone):
        from fluid import FluidConfig, FluidSimulation
        from visualizer import FluidVisualizer

        sim = FluidSimulation(FluidConfig(n=64, diffusion=0.0001))
        viz = FluidVisualizer(sim)
        viz.run()  # Opens live window
    """

    def __init__(self, simulation, vmax: float = None):
        """
        Args:
            simulation : FluidSimulation instance
            vmax       : Density mapped to the brightest color. Defaults to
                         what the emitter injects in one frame (dt * rate)
        """
        self.sim = simulation
        self.n = simulation.interior_size()
        self.vmax = vmax if vmax is not None else simulation.dt * EMITTER_DENSITY
        self._last_mouse = None

        self._setup_figure()

    def _setup_figure(self):
        """Initialize the matplotlib figure and hook up mouse events."""
        self.fig, self.ax = plt.subplots(figsize=(6, 6))
        self.fig.patch.set_facecolor('#0a0a0a')

        ax = self.ax
        ax.set_facecolor('#0a0a0a')
        ax.set_xticks([])
        ax.set_yticks([])
        for spine in ax.spines.values():
            spine.set_edgecolor('#333333')

        # density_grid() is indexed [y, x]; origin='lower' puts y = 0 at the bottom
        self.img = ax.imshow(
            self.sim.density_grid(), cmap=smoke_cmap,
            vmin=0, vmax=self.vmax,
            interpolation='bilinear',
            origin='lower',
            aspect='equal'
        )

        self.title_text = self.fig.suptitle(
            "Fluid Sim — Frame 0 | 0.0 FPS",
            color='#cccccc', fontsize=10, fontfamily='monospace'
        )

        self.fig.canvas.mpl_connect("motion_notify_event", self._on_drag)
        self.fig.canvas.mpl_connect("button_release_event", self._on_release)

        plt.tight_layout()

    def _lattice_point(self, event):
        """Mouse event → (x, y) lattice point, or None when off the grid."""
        if event.inaxes is not self.ax or event.xdata is None:
            return None
        x, y = int(round(event.xdata)), int(round(event.ydata))
        # The kernel never checks coordinates, so filter here
        if not self.sim.grid.in_bounds(x, y):
            return None
        return x, y

    def _on_drag(self, event):
        if event.button is None:
            return
        point = self._lattice_point(event)
        if point is None:
            self._last_mouse = None
            return

        i = self.sim.index(*point)
        self.sim.add_density(i, MOUSE_DENSITY)
        if self._last_mouse is not None:
            dx = point[0] - self._last_mouse[0]
            dy = point[1] - self._last_mouse[1]
            self.sim.add_velocity(i, MOUSE_FORCE * dx, MOUSE_FORCE * dy)
        self._last_mouse = point

    def _on_release(self, event):
        self._last_mouse = None

    def update(self, frame_num):
        """Called by FuncAnimation each frame. Steps sim and updates the image."""
        n = self.n
        self.sim.add_source(n // 2, 2, density=EMITTER_DENSITY, velocity=EMITTER_VELOCITY)

        metrics = self.sim.step()

        self.img.set_data(self.sim.density_grid())
        self.title_text.set_text(
            f"Fluid Sim — Frame {metrics['frame']} | "
            f"{metrics['fps']:.1f} FPS | "
            f"density={metrics['density_total']:.1f}"
        )

        return [self.img, self.title_text]

    def _animate(self, frames: int, fps: int):
        # Keep a reference, or the animation is garbage collected mid-run
        self.anim = animation.FuncAnimation(
            self.fig, self.update,
            frames=frames, interval=1000 // fps, blit=True
        )
        return self.anim

    def run(self, fps: int = 10, frames: int = 500):
        """Open the live window; the emitter and mouse feed the sim every frame."""
        self._animate(frames, fps)
        plt.show()

    def save_gif(self, path: str = "fluid_sim.gif", fps: int = 10, frames: int = 100):
        """Render `frames` steps to a GIF instead of a window (no mouse input)."""
        logger.info("Rendering %d frames (n=%d) to %s", frames, self.n, path)
        self._animate(frames, fps).save(path, writer=animation.PillowWriter(fps=fps))
        print(f"Saved: {path}")
