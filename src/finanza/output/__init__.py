"""Output generation for CSV exports."""

from finanza.output.csv_exporter import CSVExporter, encode_transactions, export_filename

__all__ = ["CSVExporter", "encode_transactions", "export_filename"]
