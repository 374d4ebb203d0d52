# showroom/core/loader.py
"""
Asynchronous model loading.

Model files (glTF/GLB/OBJ/...) are parsed off the frame loop on a thread
pool with trimesh, turned Z-up, and written to a cached OBJ that pybullet can
read.  pybullet itself is not thread-safe, so completions are *queued* and
only delivered when the frame loop calls :meth:`ModelLoader.poll` (or
:meth:`ModelLoader.wait` in headless runs); the callbacks are where nodes get
spliced into the scene.

Failure policy: log ``An error happened while loading the model: <path>``,
notify ``on_error`` if given, carry on.  No retry.
"""
from __future__ import annotations

import hashlib
import os
import queue
import threading
import time
from concurrent.futures import CancelledError, Future, ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Callable, Dict, Optional, Tuple

import numpy as np
import trimesh
from loguru import logger
from tqdm import tqdm

from showroom.constants import LOADER_MAX_WORKERS, MODEL_CACHE_DIRNAME, MODEL_FILE_SUFFIXES
from showroom.core.transforms import Y_UP_TO_Z_UP

OnLoad = Callable[["LoadedModel"], None]
OnError = Callable[[BaseException], None]


@dataclass(slots=True)
class LoadedModel:
    path: str                 # as requested by the scene
    source: Path              # resolved model file
    obj_path: Path            # Z-up OBJ handed to pybullet
    bounds_min: Tuple[float, float, float]
    bounds_max: Tuple[float, float, float]
    vertex_count: int
    face_count: int

    @property
    def size(self) -> Tuple[float, float, float]:
        return tuple(float(b - a) for a, b in zip(self.bounds_min, self.bounds_max))


# --------------------------------------------------------------------------
# Progress bookkeeping
# --------------------------------------------------------------------------
class LoadingManager:
    """Counts started / finished / failed items across every loader.

    ``on_progress(url, loaded, total)`` fires after each item, ``on_load()``
    once nothing is outstanding any more.
    """

    def __init__(
        self,
        on_progress: Optional[Callable[[str, int, int], None]] = None,
        on_load: Optional[Callable[[], None]] = None,
        show_progress: bool = False,
    ):
        self.on_progress = on_progress
        self.on_load = on_load
        self.items_total = 0
        self.items_loaded = 0
        self.items_failed = 0
        self._bar = tqdm(total=0, desc="Loading assets", unit="asset", leave=False) if show_progress else None

    @property
    def items_finished(self) -> int:
        return self.items_loaded + self.items_failed

    @property
    def done(self) -> bool:
        return self.items_finished >= self.items_total

    def item_start(self, url: str) -> None:
        self.items_total += 1
        if self._bar is not None:
            self._bar.total = self.items_total
            self._bar.refresh()

    def item_end(self, url: str, ok: bool = True) -> None:
        if ok:
            self.items_loaded += 1
        else:
            self.items_failed += 1
        if self._bar is not None:
            self._bar.update(1)
        if self.on_progress is not None:
            self.on_progress(url, self.items_finished, self.items_total)
        if self.done and self.on_load is not None:
            self.on_load()

    def close(self) -> None:
        if self._bar is not None:
            self._bar.close()
            self._bar = None


# --------------------------------------------------------------------------
# Parsing (worker threads)
# --------------------------------------------------------------------------
_YUP_TO_ZUP_4 = np.eye(4)
_YUP_TO_ZUP_4[:3, :3] = Y_UP_TO_Z_UP
CACHED_MODEL_NAME = "model.obj"


def _cache_dirname(source: Path) -> str:
    """One directory per source file and version, so exported textures never collide."""
    stat = source.stat()
    key = f"{source.resolve()}:{stat.st_mtime_ns}:{stat.st_size}"
    digest = hashlib.sha1(key.encode("utf-8")).hexdigest()[:12]
    return f"{source.parent.name}-{source.stem}-{digest}"


def _load_mesh(source: Path) -> trimesh.Trimesh:
    loaded = trimesh.load(str(source), force="scene")
    if isinstance(loaded, trimesh.Scene):
        parts = loaded.dump()
        if not parts:
            raise ValueError(f"No geometry found in {source}")
        mesh = trimesh.util.concatenate(parts)
    else:
        mesh = loaded
    if len(mesh.vertices) == 0:
        raise ValueError(f"No vertices found in {source}")
    return mesh


# --------------------------------------------------------------------------
# Loader
# --------------------------------------------------------------------------
class ModelLoader:
    def __init__(
        self,
        asset_root,
        cache_dir=None,
        manager: Optional[LoadingManager] = None,
        max_workers: int = LOADER_MAX_WORKERS,
    ):
        self.asset_root = Path(asset_root)
        self.cache_dir = Path(cache_dir) if cache_dir is not None else self.asset_root / MODEL_CACHE_DIRNAME
        self.manager = manager if manager is not None else LoadingManager()
        self._pool = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="model-loader")
        self._done: "queue.SimpleQueue" = queue.SimpleQueue()
        self._shared: Dict[str, Future] = {}
        self._export_lock = threading.Lock()
        self._pending = 0
        self.loaded = 0
        self.failed = 0

    def __enter__(self) -> "ModelLoader":
        return self

    def __exit__(self, *exc) -> None:
        self.shutdown()

    @property
    def pending(self) -> int:
        """Requests whose callbacks have not been delivered yet."""
        return self._pending

    def resolve(self, path: str) -> Path:
        candidate = Path(path)
        if not candidate.is_absolute():
            candidate = self.asset_root / candidate
        return candidate

    # -- worker side -------------------------------------------------------
    def _parse(self, path: str) -> LoadedModel:
        source = self.resolve(path)
        if not source.exists():
            raise FileNotFoundError(f"Missing model: {source}")
        if source.suffix.lower() not in MODEL_FILE_SUFFIXES:
            raise ValueError(f"Unsupported model format: {source.suffix}")
        mesh = _load_mesh(source)
        mesh.apply_transform(_YUP_TO_ZUP_4)

        model_dir = self.cache_dir / _cache_dirname(source)
        model_dir.mkdir(parents=True, exist_ok=True)
        obj_path = model_dir / CACHED_MODEL_NAME
        with self._export_lock:
            if not obj_path.exists():
                tmp = obj_path.with_name(f"{obj_path.stem}.{threading.get_ident()}.tmp.obj")
                mesh.export(str(tmp), mtl_name=f"{obj_path.stem}.mtl")
                os.replace(tmp, obj_path)

        lo, hi = mesh.bounds
        logger.debug(f"Parsed {path}: {len(mesh.vertices)} vertices -> {model_dir.name}")
        return LoadedModel(
            path=path,
            source=source,
            obj_path=obj_path,
            bounds_min=(float(lo[0]), float(lo[1]), float(lo[2])),
            bounds_max=(float(hi[0]), float(hi[1]), float(hi[2])),
            vertex_count=int(len(mesh.vertices)),
            face_count=int(len(mesh.faces)),
        )

    # -- caller side -------------------------------------------------------
    def _watch(self, future: Future, path: str, on_load: OnLoad, on_error: Optional[OnError]) -> Future:
        self.manager.item_start(path)
        self._pending += 1
        future.add_done_callback(lambda f: self._done.put((f, path, on_load, on_error)))
        return future

    def load(self, path: str, on_load: OnLoad, on_error: Optional[OnError] = None) -> Future:
        """Parse *path* in the background; *on_load* runs later on the caller's thread."""
        return self._watch(self._pool.submit(self._parse, path), path, on_load, on_error)

    def load_once(self, path: str, on_load: OnLoad, on_error: Optional[OnError] = None) -> Future:
        """Like :meth:`load`, but every caller for *path* shares one parse."""
        future = self._shared.get(path)
        if future is None:
            future = self._pool.submit(self._parse, path)
            self._shared[path] = future
        return self._watch(future, path, on_load, on_error)

    def _deliver(self, item) -> None:
        future, path, on_load, on_error = item
        self._pending -= 1
        if future.cancelled():
            error: Optional[BaseException] = CancelledError(f"load of {path} was cancelled")
        else:
            error = future.exception()
        if error is None:
            try:
                on_load(future.result())
            except Exception as exc:                            # noqa: BLE001
                logger.exception(f"Load callback failed for {path}: {exc}")
                error = exc
        if error is None:
            self.loaded += 1
            self.manager.item_end(path, ok=True)
            return

        self.failed += 1
        logger.error(f"An error happened while loading the model: {path} ({error})")
        self.manager.item_end(path, ok=False)
        if on_error is not None:
            on_error(error)

    def poll(self, max_callbacks: Optional[int] = None) -> int:
        """Deliver finished loads without blocking; returns how many ran."""
        delivered = 0
        while max_callbacks is None or delivered < max_callbacks:
            try:
                item = self._done.get_nowait()
            except queue.Empty:
                break
            self._deliver(item)
            delivered += 1
        return delivered

    def wait(self, timeout: Optional[float] = None) -> int:
        """Block until every outstanding request has been delivered."""
        deadline = None if timeout is None else time.monotonic() + timeout
        delivered = 0
        while self._pending > 0:
            remaining = None if deadline is None else deadline - time.monotonic()
            if remaining is not None and remaining <= 0:
                logger.warning(f"Timed out with {self._pending} model(s) still loading")
                break
            try:
                item = self._done.get(timeout=remaining)
            except queue.Empty:
                continue
            self._deliver(item)
            delivered += 1
        return delivered

    def shutdown(self) -> None:
        self._pool.shutdown(wait=True, cancel_futures=True)
        self.manager.close()
