"""Graph data model for shell script definitions and references."""

from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

from scanner.errors import InputError
from scanner.resolver import relative_path


UNIT_TYPE = "BashDirectory"


@dataclass
class SourceUnit:
    """A named collection of source files analysed together."""

    name: str
    type: str = UNIT_TYPE
    dir: str = ""
    files: List[str] = field(default_factory=list)

    @classmethod
    def from_dict(cls, data: Any) -> "SourceUnit":
        """
        Decode a source unit sent by the host.

        Both the nested ``{"key": {...}, "info": {...}}`` form and the flat
        ``{"Name": ..., "Files": [...]}`` form are accepted. Keys are matched
        case-insensitively.
        """
        if not isinstance(data, dict):
            raise InputError(f"source unit must be an object, got {type(data).__name__}")

        flat = _lower_keys(data)
        for section in ("key", "info"):
            nested = flat.pop(section, None)
            if nested is None:
                continue
            if not isinstance(nested, dict):
                raise InputError(f"source unit '{section}' must be an object")
            flat.update(_lower_keys(nested))

        files = flat.get("files")
        if files is None:
            files = []
        if not isinstance(files, list) or not all(isinstance(f, str) for f in files):
            raise InputError("source unit 'files' must be a list of paths")

        return cls(
            name=str(flat.get("name") or ""),
            type=str(flat.get("type") or UNIT_TYPE),
            dir=str(flat.get("dir") or ""),
            files=list(files),
        )

    def to_dict(self) -> Dict[str, Any]:
        return {
            "key": {"name": self.name, "type": self.type},
            "info": {"dir": self.dir, "files": list(self.files)},
        }


def _lower_keys(data: Dict[str, Any]) -> Dict[str, Any]:
    return {str(k).lower(): v for k, v in data.items()}


@dataclass(frozen=True)
class Definition:
    """A function declared in a script."""

    unit_type: str
    unit: str
    path: str
    name: str
    file: str
    start: int
    end: int
    kind: str = "function"
    exported: bool = True

    @property
    def data(self) -> Dict[str, str]:
        """Formatting hints for the host."""
        return {
            "Name": self.name,
            "Keyword": "function",
            "Type": " ",
            "Kind": self.kind,
            "Separator": " ",
        }

    def to_dict(self) -> Dict[str, Any]:
        return {
            "UnitType": self.unit_type,
            "Unit": self.unit,
            "Path": self.path,
            "Name": self.name,
            "Kind": self.kind,
            "File": self.file,
            "DefStart": self.start,
            "DefEnd": self.end,
            "Exported": self.exported,
            "Data": self.data,
        }


@dataclass(frozen=True)
class Reference:
    """
    A use of an identifier.

    Same-unit references leave ``def_repo`` empty; references to external
    commands name the documentation corpus repository instead.
    """

    def_unit_type: str
    def_unit: str
    def_path: str
    unit_type: str
    unit: str
    file: str
    start: int
    end: int
    is_def: bool = False
    def_repo: str = ""

    @property
    def is_external(self) -> bool:
        return bool(self.def_repo)

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {}
        if self.def_repo:
            data["DefRepo"] = self.def_repo
        data.update({
            "DefUnitType": self.def_unit_type,
            "DefUnit": self.def_unit,
            "DefPath": self.def_path,
            "UnitType": self.unit_type,
            "Unit": self.unit,
            "Def": self.is_def,
            "File": self.file,
            "Start": self.start,
            "End": self.end,
        })
        return data


def _rebase_path(path: str, old_file: str, new_file: str) -> str:
    prefix = old_file + "/"
    if path.startswith(prefix):
        return new_file + "/" + path[len(prefix):]
    return path


class GraphOutput:
    """
    Ordered accumulator of definitions and references.

    Order is file processing order, then token order within each file.
    """

    def __init__(self):
        self.defs: List[Definition] = []
        self.refs: List[Reference] = []
        self.docs: List[Dict[str, Any]] = []

    def add_def(self, definition: Definition) -> None:
        self.defs.append(definition)

    def add_ref(self, reference: Reference) -> None:
        self.refs.append(reference)

    def relative_to(self, base: Union[str, Path]) -> "GraphOutput":
        """
        Return a copy whose file fields are relative to ``base``.

        Local definition paths are built from the file name, so their file
        prefix is rewritten as well. External paths are left alone.
        """
        cache: Dict[str, str] = {}

        def rel(file: str) -> str:
            if file not in cache:
                cache[file] = relative_path(base, file)
            return cache[file]

        result = GraphOutput()
        for d in self.defs:
            new_file = rel(d.file)
            result.add_def(replace(d, file=new_file, path=_rebase_path(d.path, d.file, new_file)))

        for r in self.refs:
            new_file = rel(r.file)
            def_path = r.def_path if r.is_external else _rebase_path(r.def_path, r.file, new_file)
            result.add_ref(replace(r, file=new_file, def_path=def_path))

        for doc in self.docs:
            doc = dict(doc)
            if doc.get("File"):
                doc["File"] = rel(doc["File"])
            result.docs.append(doc)

        return result

    def get_defs(self, file: Optional[str] = None) -> List[Definition]:
        """Get definitions, optionally only those in ``file``."""
        return [d for d in self.defs if file is None or d.file == file]

    def get_refs(self, def_path: Optional[str] = None) -> List[Reference]:
        """Get references, optionally only those pointing at ``def_path``."""
        return [r for r in self.refs if def_path is None or r.def_path == def_path]

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Defs": [d.to_dict() for d in self.defs],
            "Refs": [r.to_dict() for r in self.refs],
            "Docs": list(self.docs),
        }

    def __len__(self) -> int:
        return len(self.defs) + len(self.refs)

    def __repr__(self) -> str:
        external = sum(1 for r in self.refs if r.is_external)
        return f"GraphOutput(defs={len(self.defs)}, refs={len(self.refs)}, external={external})"


@dataclass(frozen=True)
class Resolution:
    """A dependency of a source unit on another repository."""

    to_repo_clone_url: str
    to_unit_type: str
    to_unit: str

    def to_dict(self) -> Dict[str, Any]:
        return {
            "Target": {
                "ToRepoCloneURL": self.to_repo_clone_url,
                "ToUnitType": self.to_unit_type,
                "ToUnit": self.to_unit,
            }
        }
