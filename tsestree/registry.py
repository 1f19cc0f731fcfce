"""Process-wide project registry: descriptor -> Program cache with explicit invalidation."""

from __future__ import annotations

import logging
import threading
from typing import Callable, Dict, Optional, Sequence, Tuple

from .compiler import Program, create_default_program, load_program, normalize_path
from .tsconfig import resolve_project_path


logger = logging.getLogger(__name__)

ProgramKey = Tuple[str, Tuple[str, ...]]
ResolutionKey = Tuple[str, Tuple[str, ...], Tuple[str, ...]]

_MISSING = object()


class ProjectRegistry:
    """
    Caches programs per descriptor, file resolutions per descriptor set and
    default programs per file.

    Lookups of published entries do not take the lock; loads happen under it
    so concurrent first loads of a descriptor publish exactly one Program.
    """

    def __init__(self):
        self._programs: Dict[ProgramKey, Program] = {}
        self._resolutions: Dict[ResolutionKey, Optional[Program]] = {}
        self._default_programs: Dict[str, Program] = {}
        self._lock = threading.RLock()

    def get_program(self, descriptor: str, extra_file_extensions: Sequence[str] = ()) -> Program:
        """Get the Program for an absolute descriptor path, loading it on first use."""
        key = (normalize_path(descriptor), tuple(extra_file_extensions))
        program = self._programs.get(key)
        if program is not None:
            return program

        with self._lock:
            program = self._programs.get(key)
            if program is None:
                logger.debug(f"Loading project {descriptor}")
                program = load_program(descriptor, extra_file_extensions)
                self._programs[key] = program
        return program

    def get_default_program(self, file_path: str, code: Optional[str] = None,
                            options: Optional[dict] = None,
                            extra_file_extensions: Sequence[str] = (),
                            log: Optional[Callable[[str], object]] = None) -> Program:
        """Get (or synthesize) the single-file fallback program for a file."""
        key = normalize_path(file_path)
        program = self._default_programs.get(key)
        if program is not None:
            return program

        with self._lock:
            program = self._default_programs.get(key)
            if program is None:
                (log or logger.warning)(
                    f"Creating a default program for {file_path}: the file is not included in any "
                    f"of the provided projects. This is slow; add the file to a project instead."
                )
                program = create_default_program(file_path, code, options, extra_file_extensions)
                self._default_programs[key] = program
        return program

    def resolve(self, file_path: str, project_descriptors: Sequence[str], root_dir: str,
                allow_default_program: bool = False, code: Optional[str] = None,
                extra_file_extensions: Sequence[str] = (),
                log: Optional[Callable[[str], object]] = None) -> Optional[Program]:
        """
        Find the program a file belongs to.

        Args:
            file_path: Absolute path of the file being parsed
            project_descriptors: Descriptor paths, resolved against root_dir
            root_dir: Base directory for relative descriptors
            allow_default_program: Synthesize a single-file program on no match
            code: In-memory text, used when a default program is synthesized
            extra_file_extensions: Extra extensions that make files members

        Returns:
            The first program (in descriptor order) containing the file, a
            default program, or None

        Raises:
            ProjectNotFound: if a descriptor does not exist
            ProjectLoadError: if a descriptor is malformed
        """
        descriptors = tuple(resolve_project_path(d, root_dir) for d in project_descriptors)
        extensions = tuple(extra_file_extensions)
        key = (normalize_path(file_path), tuple(normalize_path(d) for d in descriptors), extensions)

        programs = [self.get_program(d, extensions) for d in descriptors]

        cached = self._resolutions.get(key, _MISSING)
        if cached is _MISSING:
            cached = next((p for p in programs if p.is_member(file_path)), None)
            with self._lock:
                cached = self._resolutions.setdefault(key, cached)
            if cached is not None:
                logger.debug(f"Resolved {file_path} to project {cached.config_file_path}")

        if cached is not None:
            return cached

        if allow_default_program:
            options = programs[0].get_compiler_options() if programs else {}
            return self.get_default_program(file_path, code, options, extensions, log)

        logger.debug(f"{file_path} is not included in any of the provided projects")
        return None

    def invalidate(self, descriptor: str) -> None:
        """Drop a descriptor's programs and every resolution that involved it."""
        target = normalize_path(descriptor)
        with self._lock:
            for key in [k for k in self._programs if k[0] == target]:
                del self._programs[key]
            for key in [k for k in self._resolutions if target in k[1]]:
                del self._resolutions[key]
        logger.debug(f"Invalidated project {descriptor}")

    def invalidate_file(self, file_path: str) -> None:
        """Drop the default program and resolutions for one file."""
        target = normalize_path(file_path)
        with self._lock:
            self._default_programs.pop(target, None)
            for key in [k for k in self._resolutions if k[0] == target]:
                del self._resolutions[key]

    def clear(self) -> None:
        """Clear all cached programs and resolutions."""
        with self._lock:
            self._programs.clear()
            self._resolutions.clear()
            self._default_programs.clear()

    def get_stats(self) -> Dict[str, int]:
        """Get registry statistics."""
        with self._lock:
            return {
                "programs": len(self._programs),
                "resolutions": len(self._resolutions),
                "default_programs": len(self._default_programs),
            }


# Global registry instance
_registry: Optional[ProjectRegistry] = None
_registry_lock = threading.Lock()


def get_registry() -> ProjectRegistry:
    """Get global registry instance."""
    global _registry
    if _registry is None:
        with _registry_lock:
            if _registry is None:
                _registry = ProjectRegistry()
    return _registry
