"""
Tests for running NDJSON events through the filter.
"""

import io
import json

from conftest import StubTransport
from hookline_filter.destinations.ndjson import NdjsonDestination
from hookline_filter.pipeline import PipelineRunner
from hookline_filter.sources.ndjson import NdjsonSource

SPEC = {
    "name": "lookup",
    "batch_max_events": 2,
    "filter": {"url": "http://lookup.test/%{id}", "target_body": "rest"},
}


class RoutingTransport(StubTransport):
    """Answers 404 for id 2, JSON for everything else."""

    def __call__(self, method, url, options):
        self.calls.append((method, url, options))
        if url.endswith("/2"):
            return 404, {}, ""
        return 200, {"content-type": "application/json"}, '{"found": true}'


def _lines(stream: io.StringIO):
    return [json.loads(line) for line in stream.getvalue().splitlines()]


class TestPipelineRunner:
    def test_runs_all_events_in_batches(self):
        source = NdjsonSource(stream=io.StringIO('{"id": 1}\n\n{"id": 2}\n{"id": 3}\n'))
        out = io.StringIO()
        transport = RoutingTransport()
        runner = PipelineRunner(
            SPEC, transport=transport, source=source, destination=NdjsonDestination(stream=out)
        )

        stats = runner.run()

        events = _lines(out)
        assert events == [
            {"id": 1, "rest": {"found": True}},
            {"id": 2, "tags": ["_httprequestfailure"]},
            {"id": 3, "rest": {"found": True}},
        ]
        assert stats == {
            "received": 3,
            "sent_events": 3,
            "sent_batches": 2,
            "failure_tagged": 1,
        }
        assert len(transport.calls) == 3

    def test_invalid_json_lines_are_tagged_and_still_filtered(self):
        source = NdjsonSource(stream=io.StringIO("plain text line\n"))
        out = io.StringIO()
        PipelineRunner(
            SPEC, transport=StubTransport(), source=source, destination=NdjsonDestination(stream=out)
        ).run()
        assert _lines(out) == [
            {"message": "plain text line", "tags": ["_jsonparsefailure"], "rest": "Bom dia"}
        ]

    def test_file_source_and_destination(self, tmp_path):
        src = tmp_path / "in.ndjson"
        dst = tmp_path / "out" / "events.ndjson"
        src.write_text('{"id": 5}\n', encoding="utf-8")
        spec = dict(
            SPEC,
            source={"type": "ndjson", "options": {"path": str(src)}},
            destination={"type": "ndjson", "options": {"path": str(dst)}},
        )

        PipelineRunner(spec, transport=RoutingTransport()).run()

        assert json.loads(dst.read_text(encoding="utf-8")) == {"id": 5, "rest": {"found": True}}
