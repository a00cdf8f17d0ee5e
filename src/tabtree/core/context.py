from __future__ import annotations
from dataclasses import dataclass, field
from pathlib import Path
from typing import IO, Any, Dict, Optional, Union

from tabtree.core.diagnostics import Diagnostics
from tabtree.core.options import TreeOptions


@dataclass
class ParseContext:
    """
    State for one pipeline run.

    Each run gets its own context, and with it its own Diagnostics; lookups
    and forests are never shared between runs.
    """

    options: TreeOptions
    logger: Any

    source: Union[str, Path, IO[str], None] = None
    output_path: Optional[str] = None

    stats: Dict[str, Any] = field(default_factory=dict)
    diagnostics: Diagnostics = field(default_factory=Diagnostics)

    debug: bool = False
