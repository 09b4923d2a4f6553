from __future__ import annotations

import time
from typing import Any, Dict, Optional

from hookline_common.logging import setup_logging
from hookline_common.models import PipelineSpec
from hookline_filter.destinations.base import Destination
from hookline_filter.destinations.ndjson import NdjsonDestination
from hookline_filter.filter import HttpFilter
from hookline_filter.sources.base import Source
from hookline_filter.sources.ndjson import NdjsonSource
from hookline_filter.transport import Transport

log = setup_logging("hookline.pipeline")


class PipelineRunner:
    """
    Runs one pipeline: source -> HTTP filter -> destination, in batches,
    until the source is exhausted.
    """

    def __init__(
        self,
        spec: Any,
        transport: Optional[Transport] = None,
        source: Optional[Source] = None,
        destination: Optional[Destination] = None,
    ) -> None:
        self._spec = self._normalize_spec(spec)
        self.name = self._spec.name
        self._batch_max_events = self._spec.batch_max_events

        self._filter = HttpFilter(self._spec.filter, transport=transport)
        self._source = source or self._build_source(self._spec.source.options)
        self._destination = destination or self._build_destination(
            self._spec.destination.options
        )

        self._metrics: Dict[str, int] = {
            "received": 0,
            "sent_events": 0,
            "sent_batches": 0,
            "failure_tagged": 0,
        }

    @property
    def metrics(self) -> Dict[str, int]:
        return dict(self._metrics)

    def run(self) -> Dict[str, int]:
        """Drain the source. Returns the final counters."""
        started = time.monotonic()
        try:
            while self.tick():
                pass
        finally:
            self._source.close()
            self._destination.close()
            self._filter.close()

        log.info(
            "pipeline_done name=%s recv=%d sent_events=%d sent_batches=%d "
            "failure_tagged=%d elapsed=%.2fs",
            self.name,
            self._metrics["received"],
            self._metrics["sent_events"],
            self._metrics["sent_batches"],
            self._metrics["failure_tagged"],
            time.monotonic() - started,
        )
        return self.metrics

    def tick(self) -> bool:
        """Process one batch. False once the source has nothing left."""
        batch = self._source.poll(self._batch_max_events)
        if not batch:
            return False
        self._metrics["received"] += len(batch)

        failure_tags = set(self._filter.config.tag_on_request_failure)
        processed = []
        for event in batch:
            before = set(event.tags)
            out = self._filter.filter(event)
            if failure_tags & (set(out.tags) - before):
                self._metrics["failure_tagged"] += 1
            out.meta["pipeline"] = self.name
            processed.append(out)

        self._destination.send(processed)
        self._metrics["sent_batches"] += 1
        self._metrics["sent_events"] += len(processed)
        return True

    def _normalize_spec(self, spec: Any) -> PipelineSpec:
        """Accept a dict or a PipelineSpec."""
        if isinstance(spec, PipelineSpec):
            return spec
        if isinstance(spec, dict):
            return PipelineSpec.model_validate(spec)
        raise TypeError("pipeline spec must be dict or PipelineSpec")

    def _build_source(self, opts: Dict[str, Any]) -> Source:
        return NdjsonSource(path=str(opts.get("path", "-")))

    def _build_destination(self, opts: Dict[str, Any]) -> Destination:
        return NdjsonDestination(path=str(opts.get("path", "-")))
