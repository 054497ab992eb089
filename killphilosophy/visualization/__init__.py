from .graph_exporter import GraphExporter

__all__ = ["GraphExporter"]
