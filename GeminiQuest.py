"""Thin Tk based UI for the Gemini Quest text adventure."""

from __future__ import annotations

import asyncio
import concurrent.futures
import logging
import threading
import tkinter as tk
from io import BytesIO
from pathlib import Path
from tkinter import messagebox
from typing import Any, Callable, Coroutine

from PIL import Image, ImageTk

import genai_api as ga
from config import AppConfig, load_config
from errors import ConfigurationError
from models import SceneRecord
from services.images import decode_data_uri, generate_image
from services.narrative import generate_initial_scene, generate_next_scene
from state import GameState

logger = logging.getLogger(__name__)

CONFIG_PATH = Path(__file__).with_name("config.json")
IMAGE_WIDTH = 640


class BackgroundLoop:
    """An asyncio event loop running for the lifetime of the app on a daemon thread.

    The GenAI client binds its async HTTP pool to the loop that first uses it,
    so every request made with one client has to go through the same loop.
    """

    def __init__(self) -> None:
        self.loop = asyncio.new_event_loop()
        self._thread = threading.Thread(target=self.loop.run_forever, daemon=True)
        self._thread.start()

    def submit(
        self,
        coro: Coroutine[Any, Any, Any],
        on_done: Callable[[Any], None],
        on_error: Callable[[Exception], None],
    ) -> concurrent.futures.Future:
        """Schedule *coro* and report its outcome from the loop thread."""

        future = asyncio.run_coroutine_threadsafe(coro, self.loop)

        def finished(fut: concurrent.futures.Future) -> None:
            try:
                result = fut.result()
            except Exception as exc:
                on_error(exc)
            else:
                on_done(result)

        future.add_done_callback(finished)
        return future

    def close(self) -> None:
        self.loop.call_soon_threadsafe(self.loop.stop)
        self._thread.join()
        self.loop.close()


class QuestGame:
    """Main application window.  Handles widgets and delegates logic."""

    def __init__(
        self,
        root: tk.Tk,
        client,
        config: AppConfig | None = None,
        runner: BackgroundLoop | None = None,
    ) -> None:
        self.root = root
        self.client = client
        self.config = config or AppConfig()
        self.state = GameState()
        self.runner = runner or BackgroundLoop()
        self._photo: ImageTk.PhotoImage | None = None

        root.title("Gemini Quest")
        self.image_label = tk.Label(root)
        self.image_label.pack()
        self.text = tk.Text(root, height=20, width=80, wrap=tk.WORD)
        self.text.pack(fill=tk.BOTH, expand=True)
        self.choice_frame = tk.Frame(root)
        self.choice_frame.pack(fill=tk.X)
        self.status = tk.Label(root, anchor=tk.W)
        self.status.pack(fill=tk.X)

    # Background work -----------------------------------------------------
    def _run(
        self,
        coro: Coroutine[Any, Any, Any],
        on_done: Callable[[Any], None],
        on_error: Callable[[Exception], None] | None = None,
    ) -> concurrent.futures.Future:
        """Run *coro* on the background loop and hand its outcome to the Tk loop."""

        on_error = on_error or self.on_error

        def failed(exc: Exception) -> None:
            logger.error("Request failed: %s", exc, exc_info=exc)
            self.root.after(0, on_error, exc)

        return self.runner.submit(
            coro,
            lambda result: self.root.after(0, on_done, result),
            failed,
        )

    # Story flow ----------------------------------------------------------
    def start(self) -> None:
        self.status.config(text="Generating the first scene...")
        self._run(generate_initial_scene(self.client, self.config), self.show_scene)

    def on_choice(self, choice: str) -> None:
        self._set_choices([])
        self.text.insert(tk.END, f"\n> {choice}\n\n")
        self.status.config(text="Generating the next scene...")
        history = list(self.state.history)
        self._run(
            generate_next_scene(self.client, history, choice, self.config),
            self.show_scene,
        )

    def show_scene(self, scene: SceneRecord) -> None:
        self.state.record_scene(scene)
        self.text.insert(tk.END, scene.scene_description + "\n")
        self.text.see(tk.END)
        self._set_choices(scene.choices)
        self.status.config(text="")
        if self.config.enable_images:
            number = self.state.scene_number
            self._run(
                generate_image(self.client, scene.image_prompt, self.config),
                lambda uri: self._on_image(number, uri),
                lambda exc: self._on_image_error(number, exc),
            )

    def _on_image(self, number: int, uri: str) -> None:
        if number != self.state.scene_number:
            logger.info(
                "Dropping image for scene %d, now at scene %d", number, self.state.scene_number
            )
            return
        self.show_image(uri)

    def _on_image_error(self, number: int, exc: Exception) -> None:
        if number == self.state.scene_number:
            self.on_error(exc)

    def show_image(self, uri: str) -> None:
        self.state.image_uri = uri
        _, data = decode_data_uri(uri)
        img = Image.open(BytesIO(data))
        img.thumbnail((IMAGE_WIDTH, IMAGE_WIDTH))
        self._photo = ImageTk.PhotoImage(img)
        self.image_label.config(image=self._photo)

    def on_error(self, exc: Exception) -> None:
        self.status.config(text=str(exc))
        messagebox.showerror("Gemini Quest", str(exc))
        if self.state.scene is not None and not self.choice_frame.winfo_children():
            self._set_choices(self.state.scene.choices)

    # Widgets -------------------------------------------------------------
    def _set_choices(self, choices: list[str]) -> None:
        for child in self.choice_frame.winfo_children():
            child.destroy()
        for choice in choices:
            tk.Button(
                self.choice_frame,
                text=choice,
                command=lambda c=choice: self.on_choice(c),
            ).pack(fill=tk.X)


def main() -> None:
    logging.basicConfig(
        level=logging.INFO, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
    config = load_config(CONFIG_PATH)
    try:
        client = ga.create_client()
    except ConfigurationError as exc:
        logger.error("%s", exc)
        raise SystemExit(str(exc)) from exc

    root = tk.Tk()
    app = QuestGame(root, client, config)
    app.start()
    try:
        root.mainloop()
    finally:
        app.runner.close()


if __name__ == "__main__":
    main()
