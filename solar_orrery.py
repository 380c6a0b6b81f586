#!/usr/bin/env python3
"""
Orrery application entry point and UI/renderer coordination.

What this module does
- Starts two event loops: a Pygame rendering thread (viewport) and the Dear PyGui UI
  (running on the main thread).
- Maintains a shared SimulationController that owns the planetary system; all access
  is guarded by a re-entrant lock for thread-safety.
- Draws each body as a flat disc at its projected position and each orbit as the
  projected ring described by PlanetarySystem.orbit_loci().

Threading model
- PygameRenderer runs in a background thread and performs: input handling (for the viewport),
  advancing the system, and drawing. It reads the system only through controller snapshots.
- The UI class runs in the main thread via Dear PyGui. It updates controls on a periodic
  frame callback and invokes SimulationController methods as needed; these are lock-protected.

Units and conventions
- Render-space units throughout; the camera stores render units per pixel.
- Colors are RGB tuples in 0..255. Textures are not loaded; each body is drawn in
  its catalog color.

Running
1) Install the package: `pip install -e .`
2) Run this module: `python solar_orrery.py`
"""

import logging
import math
import threading
import time
from typing import List, Optional

import numpy as np

# GUI and Rendering libs
import pygame
from pygame import gfxdraw
import dearpygui.dearpygui as dpg

from orrery.camera import OrbitCamera
from orrery.catalog import SOLAR_SYSTEM, CatalogError, list_catalogs, load_catalog
from orrery.constants import (
    BACKGROUND_COLOR,
    HUD_COLOR,
    ORBIT_COLOR,
    ORBIT_RING_SEGMENTS,
    SAFE_COORD_LIMIT,
    STEP_DT,
    VIEW_HEIGHT,
    VIEW_WIDTH,
)
from orrery.controller import SimulationController

logger = logging.getLogger("solar_orrery")

# Unit-diameter circle in the XZ plane, homogeneous, one column per segment
_UNIT_RING = np.vstack([
    0.5 * np.cos(np.linspace(0.0, 2 * math.pi, ORBIT_RING_SEGMENTS, endpoint=False)),
    np.zeros(ORBIT_RING_SEGMENTS),
    0.5 * np.sin(np.linspace(0.0, 2 * math.pi, ORBIT_RING_SEGMENTS, endpoint=False)),
    np.ones(ORBIT_RING_SEGMENTS),
])

# ============================================================
# Pygame Renderer Thread
# ============================================================

class PygameRenderer(threading.Thread):
    """
    Pygame loop: advances the system, draws orbit rings, bodies and the HUD.
    Handles camera panning, tilt and zoom.
    """
    def __init__(self, sim: SimulationController):
        super().__init__(daemon=True)
        self.sim = sim
        self.camera = OrbitCamera(center=(0.0, 0.0))
        self.surface = None
        self.clock = None
        self.dragging_background = False
        self.drag_start_screen = (0, 0)
        self.pan_speed_keys = 600  # pixels per second
        self.tilt_speed = math.radians(45.0)  # radians per second
        self.running = True

    def reset_camera(self):
        self.camera = OrbitCamera(center=(0.0, 0.0))
        if self.surface is not None:
            self.camera.set_viewport_size(*self.surface.get_size())

    def run(self):
        pygame.init()
        pygame.display.set_caption("Orrery - Viewport")
        self.surface = pygame.display.set_mode((VIEW_WIDTH, VIEW_HEIGHT), pygame.RESIZABLE)
        self.camera.set_viewport_size(VIEW_WIDTH, VIEW_HEIGHT)
        self.clock = pygame.time.Clock()

        last_time = time.perf_counter()
        while self.running and self.sim.running:
            now = time.perf_counter()
            real_dt = now - last_time
            last_time = now

            self.handle_events(real_dt)
            self.sim.tick(real_dt)
            self.draw()

            # Limit FPS
            self.clock.tick(60)

        pygame.quit()

    def handle_events(self, real_dt):
        keys = pygame.key.get_pressed()
        if keys[pygame.K_LEFT]:
            self.camera.pan_pixels(self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_RIGHT]:
            self.camera.pan_pixels(-self.pan_speed_keys * real_dt, 0)
        if keys[pygame.K_UP]:
            self.camera.pan_pixels(0, self.pan_speed_keys * real_dt)
        if keys[pygame.K_DOWN]:
            self.camera.pan_pixels(0, -self.pan_speed_keys * real_dt)
        if keys[pygame.K_LEFTBRACKET]:
            self.camera.set_tilt(self.camera.tilt - self.tilt_speed * real_dt)
        if keys[pygame.K_RIGHTBRACKET]:
            self.camera.set_tilt(self.camera.tilt + self.tilt_speed * real_dt)

        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                self.sim.running = False
                self.running = False

            elif event.type == pygame.VIDEORESIZE:
                self.surface = pygame.display.set_mode((event.w, event.h), pygame.RESIZABLE)
                self.camera.set_viewport_size(event.w, event.h)

            elif event.type == pygame.MOUSEWHEEL:
                factor = 1.1 if event.y > 0 else 1.0/1.1
                self.camera.zoom(factor, pygame.mouse.get_pos())

            elif event.type == pygame.MOUSEBUTTONDOWN:
                if event.button in (1, 2, 3):
                    self.dragging_background = True
                    self.drag_start_screen = pygame.mouse.get_pos()

            elif event.type == pygame.MOUSEBUTTONUP:
                if event.button in (1, 2, 3):
                    self.dragging_background = False

            elif event.type == pygame.KEYDOWN and event.key == pygame.K_SPACE:
                self.sim.toggle_play()

            elif event.type == pygame.MOUSEMOTION and self.dragging_background:
                mouse = pygame.mouse.get_pos()
                dx = mouse[0] - self.drag_start_screen[0]
                dy = mouse[1] - self.drag_start_screen[1]
                self.camera.pan_pixels(dx, dy)
                self.drag_start_screen = mouse

    def draw_orbits(self, surf, orbit_ctms: List[np.ndarray]):
        for ctm in orbit_ctms:
            ring = ctm @ _UNIT_RING
            pts = []
            for i in range(ring.shape[1]):
                sp = _safe_point(self.camera.world_to_screen(ring[:3, i]))
                if sp:
                    pts.append(sp)
            if len(pts) > 2:
                pygame.draw.aalines(surf, ORBIT_COLOR, True, pts)

    def draw(self):
        surf = self.surface
        surf.fill(BACKGROUND_COLOR)

        snap = self.sim.snapshot()
        with self.sim.lock:
            selected_idx = self.sim.selected_index

        self.draw_orbits(surf, snap.orbit_ctms)

        # Draw far bodies first so nearer ones overlap them
        order = sorted(range(len(snap.shapes)),
                       key=lambda i: self.camera.world_to_screen(snap.body_ctms[i][:3, 3])[1])
        for i in order:
            shape, ctm = snap.shapes[i], snap.body_ctms[i]
            screen_pos_s = _safe_point(self.camera.world_to_screen(ctm[:3, 3]))
            if not screen_pos_s:
                continue
            # Sphere primitive has unit diameter; column norm is the body's scale
            radius_world = 0.5 * float(np.linalg.norm(ctm[:3, 0]))
            vis_r = int(min(max(radius_world / self.camera.upp, 2), 60))
            gfxdraw.filled_circle(surf, screen_pos_s[0], screen_pos_s[1], vis_r, shape.color)
            gfxdraw.aacircle(surf, screen_pos_s[0], screen_pos_s[1], vis_r, shape.color)
            if i == selected_idx:
                gfxdraw.aacircle(surf, screen_pos_s[0], screen_pos_s[1], vis_r + 4, (255, 255, 0))
                draw_text(surf, shape.name, screen_pos_s[0] + vis_r + 6, screen_pos_s[1] - 8, HUD_COLOR)

        # HUD text
        draw_text(surf, "Drag: pan | Wheel: zoom | Arrows: pan | [ ]: tilt | Space: Pause/Play", 10, 10, HUD_COLOR)
        draw_text(surf, f"t = {snap.sim_time:.1f}  Speed: {snap.time_scale:.2f}x  "
                        f"[{'Playing' if snap.playing else 'Paused'}]", 10, 30, HUD_COLOR)

        pygame.display.flip()

_cached_font = None

def draw_text(surface, text, x, y, color):
    global _cached_font
    if not pygame.font.get_init():
        pygame.font.init()
    if _cached_font is None:
        _cached_font = pygame.font.SysFont("consolas", 16) or pygame.font.Font(None, 16)
    img = _cached_font.render(text, True, color)
    surface.blit(img, (x, y))

def _safe_point(pt):
    x, y = int(pt[0]), int(pt[1])
    if -SAFE_COORD_LIMIT <= x <= SAFE_COORD_LIMIT and -SAFE_COORD_LIMIT <= y <= SAFE_COORD_LIMIT:
        return (x, y)
    return None

# ============================================================
# Dear PyGui UI
# ============================================================

class UI:
    """
    Dear PyGui interface: catalog selection, simulation controls, body readout.
    """
    BUILTIN = "Solar System (built-in)"

    def __init__(self, sim: SimulationController, renderer: PygameRenderer):
        self.sim = sim
        self.renderer = renderer
        self.status_msg_id = None
        self.body_list_id = None
        self.readout_id = None
        self._catalog_map = {}

        self._build_ui()
        self._schedule_sync()

    def _schedule_sync(self):
        """Reschedule the periodic sync callback using frame callbacks (approx ~10Hz)."""
        current = dpg.get_frame_count()
        dpg.set_frame_callback(current + 6, self._sync_ui_with_sim)

    # -----------------------
    # UI Construction
    # -----------------------

    def _build_ui(self):
        dpg.create_context()
        dpg.create_viewport(title='Orrery - Controls', width=440, height=560)

        with dpg.window(label="Controls", width=420, height=540, pos=(10, 10), tag="main_window"):
            with dpg.group(horizontal=True):
                dpg.add_text("Catalog:")
                self._catalog_map = {self.BUILTIN: None}
                for fn, display in list_catalogs():
                    self._catalog_map[f"{display} ({fn})"] = fn
                dpg.add_combo(list(self._catalog_map.keys()), default_value=self.BUILTIN,
                              width=220, tag="catalog_combo")
                dpg.add_button(label="Rebuild", callback=lambda: self.load_catalog(dpg.get_value("catalog_combo")))

            dpg.add_separator()

            with dpg.group(horizontal=True):
                dpg.add_button(label="Play/Pause", callback=self._toggle_play)
                dpg.add_button(label="Step", callback=self._step_once)
                dpg.add_button(label="Reset Camera", callback=self.renderer.reset_camera)
            dpg.add_slider_float(label="Speed (x)", default_value=self.sim.time_scale, min_value=0.0,
                                 max_value=20.0, tag="speed_slider",
                                 callback=lambda s, a, u: self.sim.set_time_scale(a))
            dpg.add_checkbox(label="Show orbits", default_value=self.sim.show_orbits,
                             callback=lambda s, a, u: self._toggle_orbits(a))

            dpg.add_separator()
            dpg.add_text("Bodies")
            self.body_list_id = dpg.add_listbox(self.sim.body_labels(), num_items=10, width=380,
                                                callback=self._on_select_body)
            self.readout_id = dpg.add_text("")

            dpg.add_separator()
            self.status_msg_id = dpg.add_text("", color=(180, 220, 180))

        dpg.setup_dearpygui()
        dpg.show_viewport()
        dpg.set_primary_window("main_window", True)

    def _set_status(self, msg: str, color=(180, 220, 180)):
        dpg.set_value(self.status_msg_id, msg)
        dpg.configure_item(self.status_msg_id, color=color)

    def _set_error(self, msg: str):
        self._set_status(msg, color=(240, 120, 120))

    def _toggle_play(self):
        playing = self.sim.toggle_play()
        self._set_status(f"Simulation {'Playing' if playing else 'Paused'}.")

    def _step_once(self):
        # Perform a single step regardless of play state
        self.sim.step(STEP_DT)
        self._set_status("Stepped one frame.")

    def _toggle_orbits(self, value):
        with self.sim.lock:
            self.sim.show_orbits = bool(value)

    def _on_select_body(self, sender, app_data, user_data=None):
        self.sim.select_label(app_data)

    def load_catalog(self, label: str):
        fn = self._catalog_map.get(label)
        try:
            catalog = SOLAR_SYSTEM if fn is None else load_catalog(fn)
            self.sim.rebuild(catalog)
        except CatalogError as e:
            logger.error("Could not load %s: %s", label, e)
            self._set_error(f"Catalog rejected: {e}")
            return
        dpg.configure_item(self.body_list_id, items=self.sim.body_labels())
        self._set_status(f"Loaded catalog: {catalog.name}")

    def _sync_ui_with_sim(self):
        """
        Periodic UI update to reflect the selected body's state.
        """
        summary = self.sim.selected_node_summary()
        dpg.set_value(self.readout_id, summary or "Select a body to inspect it.")
        self._schedule_sync()

# ============================================================
# Application Entry
# ============================================================

def main(seed: Optional[int] = None):
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    sim = SimulationController(SOLAR_SYSTEM, seed=seed)
    renderer = PygameRenderer(sim)

    # Start Pygame renderer thread
    renderer.start()

    ui = UI(sim, renderer)

    # Keyboard shortcut in UI window to toggle play/pause (Space)
    with dpg.handler_registry():
        def key_down(sender, app_data):
            if app_data == dpg.mvKey_Spacebar:
                ui._toggle_play()
        dpg.add_key_press_handler(callback=key_down)

    # Run Dear PyGui event loop
    try:
        dpg.start_dearpygui()
    finally:
        # Stop renderer, then release the system
        sim.running = False
        renderer.running = False
        renderer.join(timeout=2.0)
        sim.shutdown()
        dpg.destroy_context()
        logger.info("Orrery closed")

if __name__ == "__main__":
    main()
