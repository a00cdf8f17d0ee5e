from __future__ import annotations

from pathlib import Path
from typing import IO, Optional, Union

from tabtree.core.context import ParseContext
from tabtree.core.exceptions import PipelineError, TabTreeError
from tabtree.core.options import TreeOptions
from tabtree.loader.reader import read_table
from tabtree.logging import get_logger
from tabtree.records.builder import build_record
from tabtree.schema.inference import resolve_columns
from tabtree.tree.assembler import assemble_forest
from tabtree.tree.nodes import Forest


class Pipeline:
    """
    Orchestrates read -> infer -> build -> assemble.
    No parsing or linking logic lives here.
    """

    def __init__(self, context: ParseContext):
        self.ctx = context
        self.log = context.logger

    def run(self) -> Forest:
        opts = self.ctx.options
        diagnostics = self.ctx.diagnostics
        self.log.info("Pipeline starting (%s mode)", opts.mode.value)

        try:
            header, rows = read_table(self.ctx.source, opts.delimiter, diagnostics)

            # Resolve everything configurable before building anything
            id_column, link_column = opts.resolve_link_columns(header)
            schema = resolve_columns(
                header,
                [row.fields for row in rows],
                opts.resolve_column_types(header, link_column),
                diagnostics,
            )

            records = [
                build_record(schema, row.fields, row.lineno, diagnostics)
                for row in rows
            ]
            forest = assemble_forest(
                records,
                schema,
                id_column,
                link_column,
                opts.mode,
                diagnostics,
            )

        except TabTreeError:
            self.log.error("Pipeline aborted", exc_info=self.ctx.debug)
            raise
        except Exception as exc:
            self.log.exception("Pipeline execution failed")
            raise PipelineError(str(exc)) from exc

        self.ctx.stats.update(
            rows=len(records),
            nodes=forest.size(),
            top_level=len(forest),
            depth=forest.depth(),
            anomalies=len(diagnostics),
        )
        self.log.info("Pipeline completed: %s", self.ctx.stats)
        return forest


def load_forest(
    source: Union[str, Path, IO[str]],
    options: Optional[TreeOptions] = None,
) -> Forest:
    """
    Read ``source`` and return its Forest.

    ``source`` is a file path, ``"-"`` for standard input, or an open text
    stream.
    """
    ctx = ParseContext(
        options=options or TreeOptions(),
        logger=get_logger(__name__),
        source=source,
    )
    return Pipeline(ctx).run()
