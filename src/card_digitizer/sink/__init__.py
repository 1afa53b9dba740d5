"""Destinations for saved card records."""

from card_digitizer.sink.airtable import AirtableSink
from card_digitizer.sink.base import RecordSink

__all__ = ["AirtableSink", "RecordSink"]
