"""Report export."""
from .report import build_report, rankings_dataframe, rankings_to_csv, report_to_json
