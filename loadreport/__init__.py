from loadreport.events import Event, Reporter
from loadreport.reporters import ChronologicalAggregator, SummaryAggregator

__all__ = ["Event", "Reporter", "SummaryAggregator", "ChronologicalAggregator"]
