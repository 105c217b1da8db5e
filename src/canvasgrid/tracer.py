"""
Debug tracing infrastructure for canvasgrid.

This module provides data structures for capturing a trace of the
conversion pipeline. When debug mode is enabled, the converter records
each pipeline stage and every stub the router placed.

This is primarily useful for:
1. Understanding why an edge ended up on a given side (or was dropped)
2. Inspecting grid dimensions and node spans for a canvas
3. Writing targeted tests against routing decisions

Usage:
    >>> converter = CanvasConverter()
    >>> html = converter.convert(canvas, debug=True)
    >>> trace = converter.get_trace()
    >>> print(trace.summary())
    >>> trace.dump_to_file("debug_trace.txt")
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


@dataclass
class StubPlacement:
    """
    Record of a single routed edge stub.

    Attributes:
        edge_id: The edge that was routed
        column: 0-based column of the reserved cell
        row: 0-based row of the reserved cell
        direction: Side the stub leaves from ("N", "S", "E", "W")
        preferred: Side the router tried first
    """

    edge_id: str
    column: int
    row: int
    direction: str
    preferred: str

    @property
    def fallback(self) -> bool:
        """Whether the stub ended up off its preferred side."""
        return self.direction != self.preferred

    def __str__(self) -> str:
        if self.fallback:
            return (
                f"{self.edge_id}: ({self.column},{self.row}) "
                f"{self.preferred} -> {self.direction} [fallback]"
            )
        return f"{self.edge_id}: ({self.column},{self.row}) {self.direction}"


@dataclass
class PipelineStage:
    """
    Snapshot of state at a pipeline stage.

    Stages recorded by the converter, in order:
    1. axes - raw and expanded grid line counts
    2. placements - node spans
    3. graph - connectivity of the canvas
    4. routing - stubs placed and edges dropped
    5. assembled - the rendered document

    Attributes:
        name: Name of this pipeline stage
        data: Dictionary of relevant data at this stage
    """

    name: str
    data: Dict[str, Any]

    def __str__(self) -> str:
        lines = [f"=== Stage: {self.name} ==="]
        for key, value in self.data.items():
            # Truncate long values
            str_val = str(value)
            if len(str_val) > 100:
                str_val = str_val[:100] + "..."
            lines.append(f"  {key}: {str_val}")
        return "\n".join(lines)


@dataclass
class ConversionTrace:
    """
    Complete trace of one canvas conversion.

    Attributes:
        stages: List of pipeline stages with their data
        stub_placements: Every stub the router placed, in routing order
        source: Name of the converted canvas (file name when known)
    """

    stages: List[PipelineStage] = field(default_factory=list)
    stub_placements: List[StubPlacement] = field(default_factory=list)
    source: str = ""

    def add_stage(self, name: str, data: Dict[str, Any]) -> None:
        """
        Add a pipeline stage snapshot.

        Args:
            name: Name of the stage (e.g., "routing")
            data: Dictionary of relevant data at this stage
        """
        self.stages.append(PipelineStage(name, data.copy()))

    def add_stub(
        self, edge_id: str, column: int, row: int, direction: str, preferred: str
    ) -> None:
        """Record a routed stub."""
        self.stub_placements.append(
            StubPlacement(edge_id, column, row, direction, preferred)
        )

    def get_stage(self, name: str) -> Optional[PipelineStage]:
        """Get a specific pipeline stage by name."""
        for stage in self.stages:
            if stage.name == name:
                return stage
        return None

    def get_stub(self, edge_id: str) -> Optional[StubPlacement]:
        """Get the stub placed for an edge, if any."""
        for stub in self.stub_placements:
            if stub.edge_id == edge_id:
                return stub
        return None

    def get_fallback_stubs(self) -> List[StubPlacement]:
        """All stubs placed on a side other than the preferred one."""
        return [s for s in self.stub_placements if s.fallback]

    def summary(self) -> str:
        """
        Generate a human-readable summary of the trace.

        Returns a string with:
        - Source name
        - Pipeline stages overview
        - Stub statistics
        """
        routing = self.get_stage("routing")
        dropped = routing.data.get("dropped", []) if routing else []

        lines = [
            "=" * 60,
            "CONVERSION TRACE SUMMARY",
            "=" * 60,
            "",
            f"Source: {self.source or '<memory>'}",
            "",
            f"Pipeline stages: {len(self.stages)}",
        ]
        for stage in self.stages:
            lines.append(f"  {stage.name}")

        lines.extend(
            [
                "",
                f"Stubs placed: {len(self.stub_placements)}",
                f"Fallback stubs: {len(self.get_fallback_stubs())}",
                f"Edges dropped: {len(dropped)}",
                "",
            ]
        )

        direction_counts: Dict[str, int] = {}
        for stub in self.stub_placements:
            direction_counts[stub.direction] = direction_counts.get(stub.direction, 0) + 1

        lines.append("Stubs by direction:")
        for direction, count in sorted(direction_counts.items(), key=lambda x: -x[1]):
            lines.append(f"  {direction}: {count}")

        return "\n".join(lines)

    def dump(self) -> str:
        """
        Generate a complete human-readable dump of the trace.

        Includes all stages with their data and every stub placement.
        """
        lines = [self.summary(), "", "=" * 60, "DETAILED TRACE", "=" * 60, ""]

        lines.append("PIPELINE STAGES:")
        lines.append("-" * 40)
        for stage in self.stages:
            lines.append(str(stage))
            lines.append("")

        lines.append("STUB PLACEMENTS:")
        lines.append("-" * 40)
        for stub in self.stub_placements:
            lines.append(str(stub))

        return "\n".join(lines)

    def dump_to_file(self, filename: str) -> None:
        """Write the complete trace dump to a file."""
        with open(filename, "w", encoding="utf-8") as f:
            f.write(self.dump())
