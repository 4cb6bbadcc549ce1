"""Tkinter desktop client for sweepmap.

Wires the engine (map decoding, geometry, compositing, segment editing,
manual control) to a robot's REST API in one window. The major classes
are:

  * ``AsyncRunner``: owns an asyncio event loop on a daemon thread. Tk
    callbacks submit coroutines to it; completions are queued and drained
    on the Tk thread by a ``root.after`` poll, so widgets are only touched
    from Tk and engine state is only mutated from the loop.
  * ``MapView``: renders the robot map on a Tk Canvas through
    ``render_map`` and keeps the ``ViewTransform`` of the image currently
    on screen. A click picks the segment under the cursor, a drag draws
    the split line overlay. Split conversion always uses the transform of
    the displayed image.
  * ``RoomsPanel``: segment list plus Rename / Join / Split / Material /
    Clean buttons, enabled from ``CapabilityFlags`` and the orchestrator
    state.
  * ``ManualControlWindow``: touch-pad style drive control backed by a
    ``ManualControlSession``; opening the window starts the session,
    closing it disables manual control.
  * ``App``: the top-level window.
"""

from __future__ import annotations

import argparse
import asyncio
import concurrent.futures
import logging
import queue
import threading
import tkinter as tk
from tkinter import filedialog, messagebox, simpledialog, ttk

from PIL import ImageTk

from ..client.api import RobotAPIClient
from ..client.config import load_config
from ..engine.compositor import SplitLine, render_map
from ..engine.decode import decode_map
from ..engine.errors import SweepmapError, TransportError, ValidationError
from ..engine.geometry import screen_to_map, segment_at
from ..engine.manual_control import (
    MAX_OFFSET,
    ControlMode,
    DirectionCommand,
    ManualControlSession,
    VelocityCommand,
    clamp_displacement,
)
from ..engine.robot_state import RobotStatus, status_from_attributes
from ..engine.segments import ScreenState, SegmentEditOrchestrator
from ..logging_config import setup_logging
from .map_io import save_map_png
from .materials import FAN_SPEED_LABELS, WATER_USAGE_LABELS, material_choices

logger = logging.getLogger(__name__)

# -- Visual constants --

CANVAS_BG = "#f2f2f7"
PAD_SIZE = 280
PAD_BG = "#e5e5ea"
KNOB_RADIUS = 25
KNOB_IDLE = "#a7c7f2"
KNOB_ACTIVE = "#0a84ff"
POLL_MS = 30
CLICK_SLOP = 4  # px; shorter drags count as a click
CLOSE_TIMEOUT = 2.0  # s to wait for manual control to be released on quit


# ---------------------------------------------------------------------------
# Pure helpers
# ---------------------------------------------------------------------------


def _pad_displacement(x, y, center, max_offset=MAX_OFFSET):
    """Pointer position on the pad -> clamped (dx, dy) from its center."""
    cx, cy = center
    return clamp_displacement(x - cx, y - cy, max_offset)


def _format_command(command):
    if isinstance(command, VelocityCommand):
        return f"v: {command.velocity} • ∠: {command.angle}°"
    if isinstance(command, DirectionCommand):
        return command.action.replace("_", " ")
    return ""


def _segment_label(segment):
    return f"{segment.display_name}  (ID: {segment.id})"


def _status_text(status: RobotStatus) -> str:
    text = status.status.value.capitalize()
    if status.battery_level is not None:
        text += f" • {status.battery_level}%"
    return text


def _preset_for_label(labels, label):
    """Reverse lookup in a preset label table; unknown labels pass through."""
    for preset, text in labels.items():
        if text == label:
            return preset
    return label


def _button_states(orch: SegmentEditOrchestrator, has_split_line: bool):
    """Which room actions are currently enabled."""
    ready = orch.state is ScreenState.READY
    has_one = len(orch.selection) >= 1
    return {
        "refresh": orch.state is not ScreenState.UNINITIALIZED,
        "rename": ready and orch.flags.can_rename and has_one,
        "join": orch.can_join,
        "split": orch.can_split and has_one and has_split_line,
        "material": ready and orch.flags.can_set_material and has_one,
        "clean": ready and orch.flags.can_clean_segments and has_one,
    }


# ---------------------------------------------------------------------------
# Async bridge
# ---------------------------------------------------------------------------


class AsyncRunner:
    """asyncio loop on a background thread, results delivered to Tk."""

    def __init__(self, root):
        self.root = root
        self.loop = asyncio.new_event_loop()
        self._done: queue.Queue = queue.Queue()
        self._thread = threading.Thread(
            target=self.loop.run_forever, name="sweepmap-io", daemon=True
        )
        self._thread.start()
        self.root.after(POLL_MS, self._drain)

    def submit(self, coro, on_done=None):
        """Schedule ``coro``; ``on_done(result, exc)`` runs on the Tk thread."""
        future = asyncio.run_coroutine_threadsafe(coro, self.loop)
        if on_done is not None:
            future.add_done_callback(
                lambda f: self._done.put((on_done, f))
            )
        return future

    def call(self, fn, *args):
        """Run a plain callable on the loop thread."""
        self.loop.call_soon_threadsafe(fn, *args)

    def _drain(self):
        while True:
            try:
                on_done, future = self._done.get_nowait()
            except queue.Empty:
                break
            exc = future.exception()
            on_done(None if exc else future.result(), exc)
        self.root.after(POLL_MS, self._drain)

    def shutdown(self):
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join(timeout=2.0)


# ---------------------------------------------------------------------------
# Map view
# ---------------------------------------------------------------------------


class MapView(ttk.Frame):
    """Canvas showing the map; click picks a segment, drag draws a cut."""

    def __init__(
        self, parent, on_segment_picked, on_split_changed, on_go_to=None
    ):
        super().__init__(parent)
        self.on_segment_picked = on_segment_picked
        self.on_split_changed = on_split_changed
        self.on_go_to = on_go_to
        self.canvas = tk.Canvas(self, bg=CANVAS_BG, highlightthickness=0)
        self.canvas.pack(fill=tk.BOTH, expand=True)

        self.robot_map = None
        self.transform = None
        self.selected_segment_id = None
        self.split_start = None
        self.split_end = None
        self._press = None
        self._photo = None  # prevent GC

        self.canvas.bind("<Configure>", lambda _e: self.render())
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Button-3>", self._on_right_click)

    def set_map(self, robot_map):
        self.robot_map = robot_map
        self.clear_split()

    def set_selected(self, segment_id):
        self.selected_segment_id = segment_id
        self.render()

    def split_line(self):
        if self.split_start is None or self.split_end is None:
            return None
        return self.split_start, self.split_end

    def clear_split(self):
        self.split_start = None
        self.split_end = None
        self.render()
        self.on_split_changed()

    def render(self):
        cw = self.canvas.winfo_width()
        ch = self.canvas.winfo_height()
        self.canvas.delete("all")
        if self.robot_map is None or cw < 2 or ch < 2:
            self.transform = None
            return
        overlay = None
        line = self.split_line()
        if line is not None:
            overlay = SplitLine(*line)
        img, self.transform = render_map(
            self.robot_map,
            (cw, ch),
            selected_segment_id=self.selected_segment_id,
            overlay=overlay,
        )
        if self.transform is None:
            self.canvas.create_text(
                cw / 2, ch / 2, text="Map unavailable", fill="#8e8e93"
            )
            return
        self._photo = ImageTk.PhotoImage(img)
        self.canvas.create_image(0, 0, image=self._photo, anchor="nw")

    def _on_press(self, event):
        self._press = (event.x, event.y)

    def _on_drag(self, event):
        if self._press is None or self.transform is None:
            return
        px, py = self._press
        if abs(event.x - px) + abs(event.y - py) < CLICK_SLOP:
            return
        if self.split_start is None or self.split_end is None:
            self.split_start = self._press
        self.split_end = (event.x, event.y)
        self.render()

    def _on_release(self, event):
        press, self._press = self._press, None
        if press is None or self.transform is None:
            return
        if abs(event.x - press[0]) + abs(event.y - press[1]) >= CLICK_SLOP:
            self.on_split_changed()
            return
        point = screen_to_map((event.x, event.y), self.transform)
        segment_id = segment_at(
            self.robot_map.layers, point, self.robot_map.pixel_size
        )
        if segment_id is not None:
            self.on_segment_picked(segment_id)

    def _on_right_click(self, event):
        if self.transform is None or self.on_go_to is None:
            return
        self.on_go_to(screen_to_map((event.x, event.y), self.transform))


# ---------------------------------------------------------------------------
# Rooms panel
# ---------------------------------------------------------------------------


class RoomsPanel(ttk.Frame):
    """Segment list and edit buttons."""

    def __init__(self, parent, actions):
        super().__init__(parent, padding=5)
        self.actions = actions
        self._ids = []

        ttk.Label(self, text="Rooms", font=("TkDefaultFont", 11, "bold")).pack(
            anchor="w"
        )
        self.listbox = tk.Listbox(
            self, selectmode=tk.MULTIPLE, exportselection=False, width=32
        )
        self.listbox.pack(fill=tk.BOTH, expand=True, pady=(4, 4))
        self.listbox.bind("<ButtonRelease-1>", self._on_click)

        self.buttons = {}
        for key, label in [
            ("refresh", "Refresh"),
            ("rename", "Rename…"),
            ("join", "Join selected"),
            ("split", "Split along line"),
            ("material", "Material…"),
            ("clean", "Clean selected"),
        ]:
            btn = ttk.Button(self, text=label, command=actions[key])
            btn.pack(fill=tk.X, pady=1)
            self.buttons[key] = btn

        self.hint = ttk.Label(self, text="", foreground="#8e8e93", wraplength=220)
        self.hint.pack(fill=tk.X, pady=(6, 0))

    def show(self, segments, selected_ids, states, hint):
        self._ids = [s.id for s in segments]
        self.listbox.delete(0, tk.END)
        for i, segment in enumerate(segments):
            self.listbox.insert(tk.END, _segment_label(segment))
            if segment.id in selected_ids:
                self.listbox.selection_set(i)
        for key, btn in self.buttons.items():
            btn.state(["!disabled"] if states[key] else ["disabled"])
        self.hint.config(text=hint)

    def _on_click(self, event):
        idx = self.listbox.nearest(event.y)
        if 0 <= idx < len(self._ids):
            self.actions["toggle"](self._ids[idx])


# ---------------------------------------------------------------------------
# Manual control
# ---------------------------------------------------------------------------


class ManualControlWindow:
    """Touch pad: drag the knob, release to stop."""

    def __init__(self, app):
        self.app = app
        self.session = ManualControlSession(
            app.api, on_error=self._on_send_error
        )
        self.top = tk.Toplevel(app.root)
        self.top.title("Manual control")
        self.top.resizable(False, False)
        self.top.protocol("WM_DELETE_WINDOW", self.close)

        self.status = ttk.Label(self.top, text="Checking capabilities…")
        self.status.pack(pady=(10, 4))
        self.canvas = tk.Canvas(
            self.top, width=PAD_SIZE, height=PAD_SIZE, bg=PAD_BG,
            highlightthickness=0,
        )
        self.canvas.pack(padx=20)
        self.readout = ttk.Label(self.top, text="")
        self.readout.pack(pady=(4, 10))

        self.center = (PAD_SIZE / 2, PAD_SIZE / 2)
        self.canvas.create_oval(
            self.center[0] - 30, self.center[1] - 30,
            self.center[0] + 30, self.center[1] + 30,
            outline="#c7c7cc", width=2,
        )
        self.knob = self.canvas.create_oval(0, 0, 0, 0, fill=KNOB_IDLE, width=0)
        self._move_knob(0, 0)

        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonPress-1>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)

        app.runner.submit(self.session.start(), self._on_started)

    def _alive(self):
        return bool(self.top.winfo_exists())

    def _on_started(self, mode, exc):
        if not self._alive():
            return
        if exc is not None:
            self.status.config(text=f"Manual control unavailable: {exc}")
            return
        if mode is None or not self.session.enabled:
            self.status.config(text="Manual control unavailable")
            return
        label = "continuous" if mode is ControlMode.CONTINUOUS else "discrete"
        self.status.config(text=f"Ready ({label})")

    def _move_knob(self, dx, dy):
        cx, cy = self.center
        self.canvas.coords(
            self.knob,
            cx + dx - KNOB_RADIUS, cy + dy - KNOB_RADIUS,
            cx + dx + KNOB_RADIUS, cy + dy + KNOB_RADIUS,
        )

    def _on_drag(self, event):
        dx, dy = _pad_displacement(event.x, event.y, self.center)
        self._move_knob(dx, dy)
        self.canvas.itemconfig(self.knob, fill=KNOB_ACTIVE)
        self.app.runner.submit(
            self.session.update(dx, dy), self._show_command
        )

    def _on_release(self, _event):
        self._move_knob(0, 0)
        self.canvas.itemconfig(self.knob, fill=KNOB_IDLE)
        self.app.runner.submit(self.session.end(), self._show_command)

    def _show_command(self, command, exc):
        if exc is None and command is not None and self._alive():
            self.readout.config(text=_format_command(command))

    def _on_send_error(self, action, exc):
        # Called on the loop thread; only hand a string to Tk.
        text = f"{action} failed: {exc}"
        self.app.post(
            lambda: self._alive() and self.status.config(text=text)
        )

    def close(self):
        """Release manual control (stopping a drag in progress) and close."""
        if self.app._manual is self:
            self.app._manual = None
        future = self.app.runner.submit(self.session.close())
        self.top.destroy()
        return future


# ---------------------------------------------------------------------------
# Application
# ---------------------------------------------------------------------------


class App:
    def __init__(self, api: RobotAPIClient, title: str = "sweepmap"):
        self.api = api
        self.root = tk.Tk()
        self.root.title(title)
        self.root.geometry("1100x720")
        self.root.protocol("WM_DELETE_WINDOW", self._on_quit)
        ttk.Style().theme_use("clam")

        self.runner = AsyncRunner(self.root)
        self.orchestrator = SegmentEditOrchestrator(api)
        self._posted: queue.Queue = queue.Queue()
        self._raw_map = None
        self._manual: ManualControlWindow | None = None

        left = ttk.Frame(self.root)
        left.pack(side=tk.LEFT, fill=tk.BOTH, expand=True, padx=5, pady=5)
        self.map_view = MapView(
            left,
            on_segment_picked=self._on_segment_picked,
            on_split_changed=self._refresh_panel,
            on_go_to=self._on_go_to,
        )
        self.map_view.pack(side=tk.TOP, fill=tk.BOTH, expand=True)

        bar = ttk.Frame(left, padding=(5, 2))
        bar.pack(side=tk.BOTTOM, fill=tk.X)
        self.status_label = ttk.Label(bar, text="Status: --")
        self.status_label.pack(side=tk.LEFT)
        ttk.Button(bar, text="Manual control", command=self._open_manual).pack(
            side=tk.RIGHT
        )
        ttk.Button(bar, text="Clear line", command=self.map_view.clear_split).pack(
            side=tk.RIGHT, padx=4
        )
        ttk.Button(bar, text="Reload map", command=self._load_map).pack(
            side=tk.RIGHT
        )
        ttk.Button(bar, text="Save snapshot…", command=self._on_save_snapshot).pack(
            side=tk.RIGHT, padx=4
        )
        self._build_controls(left)

        self.rooms = RoomsPanel(
            self.root,
            {
                "refresh": self._on_refresh,
                "rename": self._on_rename,
                "join": self._on_join,
                "split": self._on_split,
                "material": self._on_material,
                "clean": self._on_clean,
                "toggle": self._on_toggle,
            },
        )
        self.rooms.pack(side=tk.RIGHT, fill=tk.Y)

        self.root.after(POLL_MS, self._drain_posted)
        self.runner.submit(self.orchestrator.enter(), self._after_action)
        self._refresh_panel()
        self._load_map()
        self._load_status()

    def _build_controls(self, parent):
        row = ttk.Frame(parent, padding=(5, 2))
        row.pack(side=tk.BOTTOM, fill=tk.X)
        for action, label in [
            ("start", "Start"),
            ("pause", "Pause"),
            ("stop", "Stop"),
            ("home", "Home"),
        ]:
            ttk.Button(
                row, text=label, command=lambda a=action: self._on_basic(a)
            ).pack(side=tk.LEFT, padx=1)

        ttk.Label(row, text="Fan").pack(side=tk.LEFT, padx=(12, 2))
        self.fan_var = tk.StringVar()
        fan = ttk.Combobox(
            row, textvariable=self.fan_var, state="readonly", width=8,
            values=list(FAN_SPEED_LABELS.values()),
        )
        fan.pack(side=tk.LEFT)
        fan.bind("<<ComboboxSelected>>", lambda _e: self._on_preset("fan"))

        ttk.Label(row, text="Water").pack(side=tk.LEFT, padx=(8, 2))
        self.water_var = tk.StringVar()
        water = ttk.Combobox(
            row, textvariable=self.water_var, state="readonly", width=8,
            values=list(WATER_USAGE_LABELS.values()),
        )
        water.pack(side=tk.LEFT)
        water.bind("<<ComboboxSelected>>", lambda _e: self._on_preset("water"))

    def post(self, fn):
        """Queue ``fn`` to run on the Tk thread (safe from any thread)."""
        self._posted.put(fn)

    def _drain_posted(self):
        while True:
            try:
                fn = self._posted.get_nowait()
            except queue.Empty:
                break
            fn()
        self.root.after(POLL_MS, self._drain_posted)

    # -- loading --

    def _load_map(self):
        async def fetch():
            raw = await self.api.get_raw_map()
            return raw, decode_map(raw)

        def done(result, exc):
            if exc is not None:
                logger.warning("Failed to load map: %s", exc)
                self._raw_map = None
                self.map_view.set_map(None)
                return
            self._raw_map, robot_map = result
            self.map_view.set_map(robot_map)

        self.runner.submit(fetch(), done)

    def _load_status(self):
        async def fetch():
            return status_from_attributes(await self.api.get_state_attributes())

        def done(status, exc):
            if exc is None:
                self.status_label.config(text=f"Status: {_status_text(status)}")

        self.runner.submit(fetch(), done)

    # -- panel --

    def _selected_id(self):
        ids = self.orchestrator.selection.ids
        return ids[-1] if ids else None

    def _refresh_panel(self):
        orch = self.orchestrator
        has_line = self.map_view.split_line() is not None
        hint = orch.last_error
        if not hint and orch.state is ScreenState.READY and not orch.segments:
            hint = "No rooms found"
        if orch.state is ScreenState.ACTION_IN_FLIGHT:
            hint = "Working…"
        self.rooms.show(
            orch.segments,
            set(orch.selection.ids),
            _button_states(orch, has_line),
            hint,
        )
        if self.map_view.selected_segment_id != self._selected_id():
            self.map_view.set_selected(self._selected_id())

    def _after_action(self, result, exc):
        if isinstance(exc, ValidationError):
            messagebox.showinfo("Rooms", str(exc))
        elif exc is not None:
            messagebox.showerror("Rooms", str(exc))
        elif result is not None and not getattr(result, "ok", True):
            messagebox.showerror("Rooms", result.error)
        self._refresh_panel()

    def _run(self, coro_factory, reload_map=False):
        def done(result, exc):
            self._after_action(result, exc)
            if reload_map and exc is None and getattr(result, "ok", False):
                self.map_view.clear_split()
                self._load_map()

        self.runner.submit(coro_factory(), done)
        self.root.after(POLL_MS, self._refresh_panel)

    # -- actions --

    def _on_toggle(self, segment_id):
        self.runner.call(self.orchestrator.selection.toggle, segment_id)
        self.root.after(POLL_MS, self._refresh_panel)

    def _on_segment_picked(self, segment_id):
        self._on_toggle(segment_id)

    def _on_refresh(self):
        self._run(self.orchestrator.load_segments)

    def _on_rename(self):
        segment = self.orchestrator.segment(self._selected_id())
        if segment is None:
            return
        name = simpledialog.askstring(
            "Rename room",
            f"New name for {segment.display_name}:",
            initialvalue=segment.name or "",
            parent=self.root,
        )
        if name is None:
            return
        self._run(lambda: self.orchestrator.rename(segment, name))

    def _on_join(self):
        self._run(self.orchestrator.join, reload_map=True)

    def _on_split(self):
        line = self.map_view.split_line()
        segment_id = self._selected_id()
        if line is None or segment_id is None:
            return
        transform = self.map_view.transform
        self._run(
            lambda: self.orchestrator.split_from_screen(
                segment_id, line[0], line[1], transform
            ),
            reload_map=True,
        )

    def _on_material(self):
        segment = self.orchestrator.segment(self._selected_id())
        if segment is None:
            return
        if not self.orchestrator.flags.can_set_material:
            return
        self.runner.call(self.orchestrator.open_material, segment)
        MaterialDialog(self, segment)

    def _on_clean(self):
        ids = list(self.orchestrator.selection.ids)

        async def clean():
            try:
                await self.api.clean_segments(ids)
            except TransportError as exc:
                logger.warning("Failed to start segment cleaning: %s", exc)
                raise

        self._run(clean)

    def _on_basic(self, action):
        self.runner.submit(
            self.api.basic_control(action), self._report_command(action)
        )

    def _on_preset(self, kind):
        if kind == "fan":
            preset = _preset_for_label(FAN_SPEED_LABELS, self.fan_var.get())
            coro = self.api.set_fan_speed(preset)
        else:
            preset = _preset_for_label(WATER_USAGE_LABELS, self.water_var.get())
            coro = self.api.set_water_usage(preset)
        self.runner.submit(coro, self._report_command(f"{kind} {preset}"))

    def _on_go_to(self, point):
        x, y = point
        if not messagebox.askyesno(
            "Go to", f"Send the robot to ({x}, {y})?", parent=self.root
        ):
            return
        self.runner.submit(
            self.api.go_to(x, y), self._report_command("go to")
        )

    def _report_command(self, what):
        def done(_result, exc):
            if exc is not None:
                logger.warning("Command %s failed: %s", what, exc)
                messagebox.showerror("Robot", f"{what}: {exc}")
            else:
                self._load_status()

        return done

    def _on_save_snapshot(self):
        robot_map = self.map_view.robot_map
        if robot_map is None or self._raw_map is None:
            messagebox.showinfo("Snapshot", "No map loaded")
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".png",
            filetypes=[("PNG image", "*.png")],
            parent=self.root,
        )
        if not path:
            return
        size = (
            max(self.map_view.canvas.winfo_width(), 2),
            max(self.map_view.canvas.winfo_height(), 2),
        )
        img, _ = render_map(robot_map, size)
        save_map_png(img, self._raw_map, path)
        logger.info("Saved map snapshot to %s", path)

    def _open_manual(self):
        if self._manual is not None:
            self._manual.top.lift()
            return
        self._manual = ManualControlWindow(self)

    def _on_quit(self):
        if self._manual is not None:
            closing = self._manual.close()
            try:
                closing.result(timeout=CLOSE_TIMEOUT)
            except concurrent.futures.TimeoutError:
                logger.warning("Timed out releasing manual control")
        self.runner.call(self.orchestrator.leave)
        self.runner.shutdown()
        self.root.destroy()

    def run(self):
        self.root.mainloop()


class MaterialDialog:
    """Pick one of the robot's supported floor materials for a segment."""

    def __init__(self, app: App, segment):
        self.app = app
        self.segment = segment
        self.top = tk.Toplevel(app.root)
        self.top.title(segment.display_name)
        self.top.protocol("WM_DELETE_WINDOW", self._cancel)
        self.choice = tk.StringVar(value="")

        ttk.Label(self.top, text="Select floor material").pack(
            anchor="w", padx=10, pady=(10, 4)
        )
        for material, label in material_choices(
            app.orchestrator.supported_materials
        ):
            ttk.Radiobutton(
                self.top, text=label, value=material, variable=self.choice
            ).pack(anchor="w", padx=16)
        row = ttk.Frame(self.top, padding=10)
        row.pack(fill=tk.X)
        ttk.Button(row, text="Cancel", command=self._cancel).pack(side=tk.RIGHT)
        ttk.Button(row, text="Save", command=self._save).pack(
            side=tk.RIGHT, padx=4
        )

    def _save(self):
        material = self.choice.get()
        if not material:
            return
        orch = self.app.orchestrator
        self.app._run(lambda: orch.set_material(self.segment, material))
        self.top.destroy()

    def _cancel(self):
        self.app.runner.call(self.app.orchestrator.close_material)
        self.top.destroy()


def main(argv=None):
    parser = argparse.ArgumentParser(description="sweepmap desktop client")
    parser.add_argument("--env-file", default=None, help="path to a .env file")
    parser.add_argument("--debug", action="store_true")
    args = parser.parse_args(argv)

    setup_logging(app_name="sweepmap", debug=args.debug)
    try:
        config = load_config(args.env_file)
    except SweepmapError as exc:
        logger.error("%s", exc)
        raise SystemExit(2) from exc
    App(RobotAPIClient(config), title=f"sweepmap: {config.name}").run()


if __name__ == "__main__":
    main()
