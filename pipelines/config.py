"""
Pipeline Configuration

Static description of a pipeline, declared once per pipeline class.
"""

from dataclasses import dataclass


@dataclass(frozen=True)
class PipelineConfig:
    """
    Configuration for a pipeline.

    Attributes:
        name: Registry key and log tag (e.g., "player_metrics")
        display_name: Human-readable name
        description: What the pipeline does
        target_table: Table(s) the pipeline writes to
    """

    name: str
    display_name: str
    description: str
    target_table: str
