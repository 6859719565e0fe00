from __future__ import annotations

import asyncio
import hashlib
import json
import logging
import os
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional, Tuple, Union

from .codec.encoding import encode
from .codec.types import PackedBitmap
from .codegen.emitters import EMITTERS, EXTENSIONS, emit, symbol_name, validate_symbol
from .errors import PixelStampError, UnsupportedFormat
from .rendering import SUPPORTED_EXTENSIONS, GridLoader

logger = logging.getLogger(__name__)

DEFAULT_FORMAT = "c"
CACHE_FILE_NAME = ".pixelstamp-cache.json"

BUILT = "built"
CACHED = "cached"
FAILED = "failed"

PathLike = Union[str, Path]


@dataclass
class BuildSettings:
    format: str = DEFAULT_FORMAT
    name: Optional[str] = None
    force: bool = False
    jobs: Optional[int] = None


@dataclass(frozen=True)
class Asset:
    source: Path
    output: Path
    format: str
    name: str


@dataclass(frozen=True)
class BuildResult:
    asset: Asset
    status: str
    digest: Optional[str] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.status != FAILED


def file_digest(path: PathLike) -> str:
    hasher = hashlib.sha256()
    with open(path, "rb") as handle:
        for block in iter(lambda: handle.read(65536), b""):
            hasher.update(block)
    return hasher.hexdigest()


class AssetManifest:
    """JSON list of images to convert, with paths relative to the manifest file."""

    _cache: Dict[Path, Tuple[int, "AssetManifest"]] = {}

    def __init__(self, assets: Iterable[Asset], cache_path: Path) -> None:
        self._assets = list(assets)
        self.cache_path = cache_path

    @classmethod
    def load(cls, path: PathLike) -> "AssetManifest":
        path = Path(path).resolve()
        mtime = path.stat().st_mtime_ns
        cached = cls._cache.get(path)
        if cached and cached[0] == mtime:
            return cached[1]
        try:
            raw = json.loads(path.read_text(encoding="utf-8"))
        except json.JSONDecodeError as exc:
            raise ValueError(f"Invalid manifest {path}: {exc}") from exc
        manifest = cls.from_dict(raw, path.parent)
        cls._cache[path] = (mtime, manifest)
        return manifest

    @classmethod
    def from_dict(cls, raw: Any, base_dir: Path) -> "AssetManifest":
        if not isinstance(raw, dict) or not isinstance(raw.get("assets"), list):
            raise ValueError("Manifest must be an object with an 'assets' list")
        output_dir = base_dir / raw.get("output_dir", ".")
        default_format = raw.get("format", DEFAULT_FORMAT)
        cache_path = output_dir / raw.get("cache", CACHE_FILE_NAME)
        assets = [
            cls._parse_asset(item, index, base_dir, output_dir, default_format)
            for index, item in enumerate(raw["assets"])
        ]
        cls._check_outputs(assets)
        return cls(assets, cache_path)

    @staticmethod
    def _parse_asset(item: Any, index: int, base_dir: Path, output_dir: Path, default_format: str) -> Asset:
        if isinstance(item, str):
            item = {"source": item}
        if not isinstance(item, dict) or not item.get("source"):
            raise ValueError(f"Manifest asset #{index} must be a path or an object with 'source'")
        fmt = item.get("format", default_format)
        if fmt not in EMITTERS:
            raise ValueError(f"Manifest asset #{index} has unknown format '{fmt}'")
        source = base_dir / item["source"]
        name = item.get("name") or symbol_name(source)
        try:
            validate_symbol(name)
        except ValueError as exc:
            raise ValueError(f"Manifest asset #{index}: {exc}") from exc
        output = item.get("output")
        if output:
            output_path = output_dir / output
        else:
            output_path = output_dir / (source.stem + EXTENSIONS[fmt])
        return Asset(source=source, output=output_path, format=fmt, name=name)

    @staticmethod
    def _check_outputs(assets: List[Asset]) -> None:
        seen: Dict[Path, int] = {}
        for index, asset in enumerate(assets):
            first = seen.setdefault(asset.output, index)
            if first != index:
                raise ValueError(
                    f"Manifest assets #{first} and #{index} both write {asset.output}; set 'output' on one of them"
                )

    @property
    def assets(self) -> List[Asset]:
        return list(self._assets)


class BuildCache:
    """Content hashes of the sources behind each generated file, keyed by output path."""

    def __init__(self, path: Path, entries: Optional[Dict[str, Dict[str, str]]] = None) -> None:
        self.path = path
        self._entries = dict(entries or {})

    @classmethod
    def load(cls, path: Path) -> "BuildCache":
        if not path.is_file():
            return cls(path)
        try:
            entries = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            logger.warning("Ignoring unreadable build cache %s: %s", path, exc)
            return cls(path)
        if not isinstance(entries, dict):
            logger.warning("Ignoring malformed build cache %s", path)
            return cls(path)
        return cls(path, entries)

    @staticmethod
    def _entry(asset: Asset, digest: str) -> Dict[str, str]:
        return {
            "sha256": digest,
            "source": str(asset.source),
            "format": asset.format,
            "name": asset.name,
        }

    def is_fresh(self, asset: Asset, digest: str) -> bool:
        entry = self._entries.get(str(asset.output))
        if entry != self._entry(asset, digest):
            return False
        return asset.output.is_file()

    def record(self, asset: Asset, digest: str) -> None:
        self._entries[str(asset.output)] = self._entry(asset, digest)

    def save(self) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(self._entries, indent=2, sort_keys=True) + "\n", encoding="utf-8")


class StampBuilder:
    def __init__(self, settings: Optional[BuildSettings] = None, loader: Optional[GridLoader] = None) -> None:
        self.settings = settings or BuildSettings()
        self.loader = loader or GridLoader()

    def build_from_file(self, path: PathLike) -> PackedBitmap:
        path = str(path)
        self._validate_input_path(path)
        grid = self.loader.load(path)
        bitmap = encode(grid)
        logger.debug("Encoded %s: %dx%d, %d bytes", path, bitmap.width, bitmap.height, len(bitmap.data))
        return bitmap

    def render(self, path: PathLike) -> bytes:
        bitmap = self.build_from_file(path)
        name = self.settings.name or symbol_name(path)
        return emit(bitmap, self.settings.format, name)

    def build_asset(self, asset: Asset, cache: BuildCache) -> BuildResult:
        try:
            digest = file_digest(asset.source)
            if not self.settings.force and cache.is_fresh(asset, digest):
                logger.debug("Up to date: %s", asset.source)
                return BuildResult(asset, CACHED, digest)
            bitmap = self.build_from_file(asset.source)
            data = emit(bitmap, asset.format, asset.name)
            asset.output.parent.mkdir(parents=True, exist_ok=True)
            asset.output.write_bytes(data)
        except (PixelStampError, OSError, ValueError) as exc:
            logger.error("Failed to build %s: %s", asset.source, exc)
            return BuildResult(asset, FAILED, error=str(exc))
        logger.info("Wrote %s", asset.output)
        return BuildResult(asset, BUILT, digest)

    def build_manifest(self, manifest: AssetManifest) -> List[BuildResult]:
        cache = BuildCache.load(manifest.cache_path)
        results = [self.build_asset(asset, cache) for asset in manifest.assets]
        self._update_cache(cache, results)
        return results

    async def build_manifest_async(self, manifest: AssetManifest) -> List[BuildResult]:
        cache = BuildCache.load(manifest.cache_path)
        loop = asyncio.get_running_loop()
        with ThreadPoolExecutor(max_workers=self._workers()) as executor:
            tasks = [loop.run_in_executor(executor, self.build_asset, asset, cache) for asset in manifest.assets]
            results = list(await asyncio.gather(*tasks))
        self._update_cache(cache, results)
        return results

    def _workers(self) -> int:
        if self.settings.jobs:
            return max(1, self.settings.jobs)
        return min(8, os.cpu_count() or 1)

    @staticmethod
    def _update_cache(cache: BuildCache, results: Iterable[BuildResult]) -> None:
        changed = False
        for result in results:
            if result.status == BUILT and result.digest:
                cache.record(result.asset, result.digest)
                changed = True
        if changed:
            cache.save()

    @staticmethod
    def _validate_input_path(path: str) -> None:
        ext = os.path.splitext(path)[1].lower()
        if ext not in SUPPORTED_EXTENSIONS:
            raise UnsupportedFormat("Supported formats: " + ", ".join(sorted(SUPPORTED_EXTENSIONS)))
        if not os.path.isfile(path):
            raise FileNotFoundError(f"File not found: {path}")
